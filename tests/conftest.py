import pytest

from stepsweep.progression import Progression


class Recorder:
    """Collects (sender, field) change notifications."""

    def __init__(self) -> None:
        self.events: list[tuple[object, str]] = []

    def __call__(self, sender, field_name) -> None:
        self.events.append((sender, field_name))

    @property
    def fields(self) -> list[str]:
        return [f for _, f in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def ascending():
    return Progression(0.0, 1.5, 0.1)


@pytest.fixture
def descending():
    return Progression(5.0, 0.0, -1.0)


@pytest.fixture
def empty():
    return Progression()


@pytest.fixture
def template():
    return Progression.parse("*From -5 To 5 By 0")


@pytest.fixture
def recorder():
    return Recorder()
