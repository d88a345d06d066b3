"""Narrative content: dialogue batches keyed by mission."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from netquest.domain.errors import CatalogError, ContractViolation
from netquest.domain.types import DialogueLine, MissionId
from netquest.rules.catalog import DEFAULT_DATA_DIR, load_json, parse_lines


@dataclass(frozen=True)
class ChoiceOption:
    id: str
    text: str
    correct: bool
    response: tuple[DialogueLine, ...]


@dataclass(frozen=True)
class Choice:
    question: str
    options: tuple[ChoiceOption, ...]

    def option(self, option_id: str) -> ChoiceOption:
        for option in self.options:
            if option.id == option_id:
                return option
        raise ContractViolation(f"Unknown choice option: {option_id!r}")


@dataclass(frozen=True)
class MissionContent:
    batches: dict[str, tuple[DialogueLine, ...]]
    choice: Choice | None = None

    def lines(self, *names: str) -> tuple[DialogueLine, ...]:
        """Concatenate the named batches in the given order."""
        out: list[DialogueLine] = []
        for name in names:
            try:
                out.extend(self.batches[name])
            except KeyError as exc:
                raise CatalogError(f"No dialogue batch named {name!r}") from exc
        return tuple(out)


@dataclass(frozen=True)
class Content:
    missions: dict[MissionId, MissionContent]

    @staticmethod
    def load(data_dir: Path | None = None) -> "Content":
        path = (data_dir or DEFAULT_DATA_DIR) / "dialogue.json"
        data = load_json(path)
        missions: dict[MissionId, MissionContent] = {}
        for key, entry in data.items():
            try:
                mission_id = MissionId.parse(key)
            except ContractViolation as exc:
                raise CatalogError(f"{path}: {exc}") from exc
            if not isinstance(entry, dict):
                raise CatalogError(f"{path}: mission {key} must be object")
            batches = {
                str(name): parse_lines(raw, path)
                for name, raw in entry.items()
                if name != "choice"
            }
            choice = None
            if isinstance(entry.get("choice"), dict):
                choice_raw = entry["choice"]
                choice = Choice(
                    question=str(choice_raw.get("question", "")),
                    options=tuple(
                        ChoiceOption(
                            id=str(opt["id"]),
                            text=str(opt.get("text", "")),
                            correct=bool(opt.get("correct", False)),
                            response=parse_lines(opt.get("response", []), path),
                        )
                        for opt in choice_raw.get("options", [])
                    ),
                )
            missions[mission_id] = MissionContent(batches=batches, choice=choice)
        return Content(missions=missions)

    def mission(self, mission_id: MissionId | str) -> MissionContent:
        key = MissionId.parse(mission_id)
        try:
            return self.missions[key]
        except KeyError as exc:
            raise ContractViolation(f"No content for mission {key}") from exc
