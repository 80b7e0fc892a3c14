from enum import Enum


class ConstraintDirection(Enum):
    """Direction of a one-sided point constraint on the fitted spline."""
    GREATER_EQUAL   = ">="
    LESS_EQUAL      = "<="

    @property
    def sign(self):
        """Row factor that turns the bound into the solver form ``row . tau <= rhs``."""
        return -1.0 if self is ConstraintDirection.GREATER_EQUAL else 1.0

    @classmethod
    def parse(cls, value):
        """Accept an enum member, ``">="``/``"<="`` or ``"ge"``/``"le"``."""
        if isinstance(value, cls):
            return value
        aliases = {"ge": cls.GREATER_EQUAL, "le": cls.LESS_EQUAL}
        if isinstance(value, str) and value.lower() in aliases:
            return aliases[value.lower()]
        return cls(value)
