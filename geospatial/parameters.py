"""
Named Projection Parameters.

Projections are configured from an ordered collection of name/value pairs
such as ``central_meridian`` or ``scale_factor``. Names are matched without
regard to case. Angular values are decimal degrees; linear values are meters.
"""

from collections import abc
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Union


@dataclass(frozen=True)
class ProjectionParameter:
    """A single named projection parameter.

    Attributes
    ----------
    name : str
        Parameter name (e.g. 'central_meridian').
    value : float
        Parameter value.
    """
    name: str
    value: float


ParameterSource = Union[
    'ParameterList',
    Iterable[ProjectionParameter],
    Mapping[str, float],
]


class ParameterList:
    """Ordered, case-insensitive collection of projection parameters.

    Examples
    --------
    >>> params = ParameterList({"central_meridian": 0.0, "scale_factor": 1.0})
    >>> params.get_parameter("Scale_Factor")
    1.0
    >>> params.get_parameter("false_easting") is None
    True
    """

    def __init__(self, parameters: Optional[ParameterSource] = None):
        if parameters is None:
            items: List[ProjectionParameter] = []
        elif isinstance(parameters, ParameterList):
            items = list(parameters)
        elif isinstance(parameters, abc.Mapping):
            items = [ProjectionParameter(name, float(value)) for name, value in parameters.items()]
        else:
            items = []
            for param in parameters:
                if not isinstance(param, ProjectionParameter):
                    raise TypeError(
                        f"Expected ProjectionParameter, got {type(param).__name__}"
                    )
                items.append(param)

        self._items: List[ProjectionParameter] = items

    def get_parameter(self, name: str) -> Optional[float]:
        """Look up a parameter value by name.

        Parameters
        ----------
        name : str
            Parameter name, matched case-insensitively.

        Returns
        -------
        float or None
            The value of the first matching parameter, or None if absent.
        """
        key = name.lower()
        for param in self._items:
            if param.name.lower() == key:
                return param.value
        return None

    def get_parameter_value(self, name: str, default: Optional[float] = None) -> float:
        """Look up a parameter that must be present unless a default is given.

        Raises
        ------
        KeyError
            If the parameter is absent and no default was supplied.
        """
        value = self.get_parameter(name)
        if value is not None:
            return value
        if default is not None:
            return default
        raise KeyError(f"Missing projection parameter '{name}'")

    def to_dict(self) -> Dict[str, float]:
        """Return the parameters as a plain name -> value mapping."""
        return {param.name: param.value for param in self._items}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_parameter(name) is not None

    def __iter__(self) -> Iterator[ProjectionParameter]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        body = ", ".join(f"{p.name}={p.value!r}" for p in self._items)
        return f"ParameterList({body})"
