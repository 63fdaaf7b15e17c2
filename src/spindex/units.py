"""
Units: parse unit strings and convert values between units, via pint.

The rest of spindex treats unit strings as opaque text (for example the
``units`` attribute of a bundle variable); this module is where they get
meaning. UDUNITS spellings as found in netCDF files (``'kg m-2 s-1'``)
are accepted alongside pint's own (``'kg / m**2 / s'``).
"""

import re

import pint

from spindex.errors import UnitsError

# a letter directly followed by a signed integer is an exponent ('m-2', 's2'),
# except inside a float literal such as '1e-9'
_UDUNITS_EXPONENT = re.compile(
    r"(?<=[A-Za-z])(?![A-Za-z])(?<![0-9\-][eE])(?<![0-9\-])(?=[0-9\-])")


def udunits_to_pint(text):
    """Rewrite UDUNITS exponents for pint: 'kg m-2 s-1' -> 'kg m**-2 s**-1'."""
    return _UDUNITS_EXPONENT.sub("**", text)


ureg = pint.UnitRegistry(preprocessors=[udunits_to_pint])

_PARSE_ERRORS = (pint.errors.PintError, AttributeError, ValueError, TypeError)


class UnitSystem:
    """
    A unit registry with spindex error reporting.

    Parameters
    ----------
    registry : pint.UnitRegistry, optional
        Defaults to the module-wide registry, so units from different
        UnitSystem objects can be mixed.

    Examples
    --------
    >>> us = UnitSystem()
    >>> us.convert(2.5, 'km', 'm')
    2500.0
    >>> to_kelvin = us.converter('degC', 'K')
    >>> to_kelvin(0.0)
    273.15
    """

    def __init__(self, registry=None):
        self.registry = registry if registry is not None else ureg

    def parse(self, text):
        """Return the pint.Unit for a unit string such as 'kg m-2 s-1' or 'm/s'."""
        if not text or not text.strip():
            raise UnitsError("Empty unit string")
        try:
            return self.registry.parse_units(udunits_to_pint(text.strip()))
        except _PARSE_ERRORS as e:
            raise UnitsError(f"Cannot parse unit string {text!r}: {e}") from e

    def dimensionless(self):
        return self.registry.dimensionless

    def format(self, text, abbreviated=True):
        """Canonical spelling of a unit string ('meter / second' -> 'm / s')."""
        unit = self.parse(text)
        return format(unit, '~') if abbreviated else str(unit)

    def converter(self, from_units, to_units):
        """
        Callable converting scalars or numpy arrays from one unit to another.

        Raises UnitsError up front if either unit is unknown or the two
        are not dimensionally compatible.
        """
        src = self.parse(from_units)
        dst = self.parse(to_units)
        if src.dimensionality != dst.dimensionality:
            raise UnitsError(
                f"Cannot convert {from_units!r} -> {to_units!r}: "
                f"{src.dimensionality} vs {dst.dimensionality}")

        registry = self.registry

        def convert(values):
            return registry.Quantity(values, src).to(dst).magnitude

        return convert

    def convert(self, values, from_units, to_units):
        return self.converter(from_units, to_units)(values)
