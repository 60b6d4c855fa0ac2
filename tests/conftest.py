import pytest


class FakePlayer:
    def __init__(self, url: str = "", fail_on: tuple[str, ...] = (), **options) -> None:
        self.url = url
        self.options = options
        self.fail_on = set(fail_on)
        self.calls: list[str] = []
        self.playing = False
        self.released = False
        self._muted = False
        self._volume = 1.0
        self.loop = False

    @property
    def muted(self) -> bool:
        return self._muted

    @muted.setter
    def muted(self, value: bool) -> None:
        if "mute" in self.fail_on:
            raise RuntimeError("player gone")
        self._muted = value

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = value

    def play(self) -> None:
        self.calls.append("play")
        if "play" in self.fail_on:
            raise RuntimeError("player gone")
        self.playing = True

    def pause(self) -> None:
        self.calls.append("pause")
        if "pause" in self.fail_on:
            raise RuntimeError("player gone")
        self.playing = False

    def release(self) -> None:
        self.calls.append("release")
        if "release" in self.fail_on:
            raise RuntimeError("already released")
        self.released = True


@pytest.fixture
def make_player():
    return FakePlayer
