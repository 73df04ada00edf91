"""
Lookup interfaces consumed by the schedule validator, plus in-memory
implementations backed by a loaded catalog.

The validator only depends on the two Protocols, so tests and callers can
hand it any object with the right method.
"""

from typing import Iterable, Protocol

from models import ParsedPrereqData, Program


class PrereqRepository(Protocol):
    def get_parsed_prereq_data(self, course_codes: Iterable[str]) -> dict[str, ParsedPrereqData]:
        """Entries for every known code; unknown codes are simply absent."""
        ...


class ProgramRepository(Protocol):
    def get_program_by_name(self, name: str) -> Program | None:
        ...


class InMemoryPrereqRepository:
    def __init__(self, prereq_map: dict[str, ParsedPrereqData]):
        self._prereq_map = dict(prereq_map)

    def get_parsed_prereq_data(self, course_codes: Iterable[str]) -> dict[str, ParsedPrereqData]:
        return {
            code: self._prereq_map[code]
            for code in set(course_codes)
            if code in self._prereq_map
        }


class InMemoryProgramRepository:
    """Program lookup by name, case-insensitive and whitespace-trimmed."""

    def __init__(self, programs: Iterable[Program]):
        self._programs: dict[str, Program] = {}
        for program in programs:
            self._programs[self._key(program.name)] = program

    @staticmethod
    def _key(name: str) -> str:
        return " ".join(str(name or "").split()).lower()

    def program_names(self) -> list[str]:
        return sorted(p.name for p in self._programs.values())

    def get_program_by_name(self, name: str) -> Program | None:
        return self._programs.get(self._key(name))
