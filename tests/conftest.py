import typing

import pytest

import automatone.cellular.grid


class FakeOscClient:

	"""Records OSC messages instead of sending them."""

	def __init__ (self, fail: bool = False) -> None:

		self.messages: typing.List[typing.Tuple[str, typing.List[typing.Any]]] = []
		self.fail = fail

	def send_message (self, address: str, value: typing.Any) -> None:

		"""Store the message, or raise like a closed socket when ``fail`` is set."""

		if self.fail:
			raise OSError("Network is unreachable")

		self.messages.append((address, list(value)))

	def addresses (self) -> typing.List[str]:

		return [address for address, _ in self.messages]


@pytest.fixture
def fake_osc_client () -> FakeOscClient:

	"""An OSC client that records every message."""

	return FakeOscClient()


@pytest.fixture
def failing_osc_client () -> FakeOscClient:

	"""An OSC client whose every send raises."""

	return FakeOscClient(fail=True)


@pytest.fixture
def blinker_history () -> typing.List[automatone.cellular.grid.Grid]:

	"""Six generations of a period-2 blinker in a 5x5 grid, starting horizontal."""

	horizontal = automatone.cellular.grid.grid_from_cells(5, 5, [(1, 2), (2, 2), (3, 2)])
	vertical = automatone.cellular.grid.grid_from_cells(5, 5, [(2, 1), (2, 2), (2, 3)])

	return [horizontal, vertical] * 3
