"""OSC broadcasting of generated sequences.

Sends a finished sequence, and any cell changes, to a visual front end over
UDP. Messages, in order:

- ``/sequence/start <int count>``: Number of steps that follow
- ``/step <int index> <int time>``: One per step
- ``/note <int index> <int pitch> <int velocity> <int column> <int row> <str state>``: One per note of that step
- ``/cell <int x> <int y> <str type> <int generation>``: One per cell change
- ``/sequence/end``

Missing note metadata is sent as ``-1`` (column, row) and ``active`` (state).
"""

import logging
import typing

import pythonosc.udp_client

import automatone.events


logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9001


class OscBroadcaster:

	"""Fire-and-forget OSC sender for sequences."""

	def __init__ (self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, client: typing.Optional[typing.Any] = None) -> None:

		"""Create the UDP client (or use ``client``, which only needs ``send_message``)."""

		self.host = host
		self.port = port
		self._client = client if client is not None else pythonosc.udp_client.SimpleUDPClient(host, port)

	def send (self, address: str, *args: typing.Any) -> bool:

		"""Send one OSC message. Returns False (and logs) on a transport error."""

		try:
			self._client.send_message(address, list(args))
		except Exception as e:
			logger.warning(f"OSC send error: {e}")
			return False

		return True

	def broadcast (
		self,
		steps: typing.Sequence[automatone.events.Step],
		cell_changes: typing.Sequence[automatone.events.CellChange] = ()
	) -> int:

		"""Send a whole sequence and its cell changes. Returns the number of messages that went out."""

		sent = 0
		sent += self.send("/sequence/start", len(steps))

		for step in steps:

			sent += self.send("/step", step.step, step.time)

			for note in step.notes:
				sent += self.send(
					"/note",
					step.step,
					note.pitch,
					note.velocity,
					note.column if note.column is not None else -1,
					note.row if note.row is not None else -1,
					note.state or "active",
				)

		for change in cell_changes:
			sent += self.send("/cell", change.x, change.y, change.type.value, change.generation)

		sent += self.send("/sequence/end")

		logger.info(f"Sent {sent} OSC messages to {self.host}:{self.port}")

		return sent
