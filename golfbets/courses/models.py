from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from golfbets.errors import ConfigurationError


class CourseHole(BaseModel):
    number: int = Field(
        ge=1,
        le=18,
        validation_alias=AliasChoices("number", "holeNumber", "hole_number"),
        serialization_alias="holeNumber",
    )
    par: int = Field(ge=3, le=6)
    # Stroke-allocation rank ("hole handicap"), 1 = hardest.
    stroke_index: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("stroke_index", "strokeIndex", "handicap"),
        serialization_alias="strokeIndex",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CourseTee(BaseModel):
    course_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("course_id", "courseId"),
        serialization_alias="courseId",
    )
    tee_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tee_name", "teeName"),
        serialization_alias="teeName",
    )
    slope: int = 113
    rating: float | None = None
    holes: List[CourseHole] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def par(self) -> int:
        return sum(hole.par for hole in self.holes)

    @property
    def hole_numbers(self) -> List[int]:
        return sorted(hole.number for hole in self.holes)

    def hole(self, number: int) -> CourseHole:
        for hole in self.holes:
            if hole.number == number:
                return hole
        raise ConfigurationError(f"hole {number} is not part of this course")

    def stroke_ranks(self) -> Dict[int, int]:
        """Return ``{hole_number: stroke_index}`` after validating the ranking.

        The ranks must be a permutation of ``1..len(holes)``; anything else is
        a configuration problem the allocator refuses to paper over.
        """

        if not self.holes:
            raise ConfigurationError("course has no holes")
        numbers = [hole.number for hole in self.holes]
        if len(set(numbers)) != len(numbers):
            raise ConfigurationError("course has duplicate hole numbers")

        ranks: Dict[int, int] = {}
        for hole in self.holes:
            if hole.stroke_index is None:
                raise ConfigurationError(
                    f"hole {hole.number} is missing its stroke-allocation rank"
                )
            ranks[hole.number] = hole.stroke_index

        expected = set(range(1, len(self.holes) + 1))
        if set(ranks.values()) != expected or len(ranks) != len(expected):
            raise ConfigurationError(
                f"stroke-allocation ranks must be unique values 1..{len(self.holes)}"
            )
        return ranks


__all__ = ["CourseHole", "CourseTee"]
