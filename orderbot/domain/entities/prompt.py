from dataclasses import dataclass, field


@dataclass(frozen=True)
class Button:
    label: str
    token: str


@dataclass(frozen=True)
class Prompt:
    text: str
    keyboard: list[list[Button]] = field(default_factory=list)
