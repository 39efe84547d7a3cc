"""Material quantities accumulated during a build."""

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class MaterialTally:
    """Running material totals.

    Tallies are immutable: each generator returns its own tally and the
    caller folds them with ``+``. Support posts are priced as joist stock,
    so their heights are included in ``joist_feet`` and ``support_posts``
    only counts them.
    """

    board_feet: float = 0.0
    joist_feet: float = 0.0
    rail_feet: float = 0.0
    railing_posts: int = 0
    stair_feet: float = 0.0
    stair_steps: int = 0
    support_posts: int = 0
    furniture_count: int = 0

    def __add__(self, other: "MaterialTally") -> "MaterialTally":
        if not isinstance(other, MaterialTally):
            return NotImplemented
        return MaterialTally(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )

    @classmethod
    def total(cls, tallies) -> "MaterialTally":
        """Fold an iterable of tallies, starting from zero."""
        result = cls()
        for tally in tallies:
            result = result + tally
        return result

    def to_dict(self) -> dict:
        return {
            "board_feet": round(self.board_feet, 2),
            "joist_feet": round(self.joist_feet, 2),
            "rail_feet": round(self.rail_feet, 2),
            "railing_posts": self.railing_posts,
            "stair_feet": round(self.stair_feet, 2),
            "stair_steps": self.stair_steps,
            "support_posts": self.support_posts,
            "furniture_count": self.furniture_count,
        }
