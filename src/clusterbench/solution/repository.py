"""Repository identity under benchmark."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Repository:
    """A solution under test, identified by owner, name and solution file.

    Used as a dictionary key in result containers, so equality is by value.
    """

    owner: str
    name: str
    solution: str

    def parsed_location(self, parsed_data_root: Path) -> Path:
        """Folder holding this repository's parsed project graphs."""
        return Path(parsed_data_root) / self.owner / self.name

    def source_location(self, repo_root: Path) -> Path:
        """Path of the solution file inside a checked-out repository."""
        return Path(repo_root) / self.name / self.solution

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"
