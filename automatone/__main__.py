import argparse
import logging
import typing

import automatone.config
import automatone.constants.timing
import automatone.engine
import automatone.midi_export
import automatone.osc


logger = logging.getLogger(__name__)


def parse_args (argv: typing.Optional[typing.Sequence[str]] = None) -> argparse.Namespace:

	parser = argparse.ArgumentParser(prog="automatone", description="Generate a note sequence with one of the automatone algorithms")
	parser.add_argument("--config", default="config.yaml", help="YAML config file (default: config.yaml)")
	parser.add_argument("--algorithm", default=None, help="Algorithm to run (overrides the config file)")
	parser.add_argument("--seed", type=int, default=None, help="Random seed for a repeatable run")
	parser.add_argument("--midi", default=None, help="Write the sequence to this MIDI file")
	parser.add_argument("--osc", action="store_true", help="Broadcast the sequence over OSC")

	return parser.parse_args(argv)


def main (argv: typing.Optional[typing.Sequence[str]] = None) -> int:

	"""
	Main entry point for the automatone command line.
	"""

	logging.basicConfig(level=logging.INFO)

	args = parse_args(argv)
	config = automatone.config.load_config(args.config)

	name = args.algorithm or config.get("algorithm", automatone.engine.Algorithm.CELLULAR.value)
	algorithm = automatone.engine.resolve_algorithm(name)
	params = config.get(algorithm.value) or {}

	logger.info(f"Automatone generating with '{algorithm.value}'...")

	engine = automatone.engine.AlgorithmEngine()
	steps = engine.generate(algorithm, params, seed=args.seed)

	for step in steps:
		pitches = " ".join(str(note.pitch) for note in step.notes) or "-"
		logger.info(f"{step.step:4d} {step.time:7d}ms  {pitches}")

	output = automatone.config.normalize_keys(config.get("output"))

	midi_file = args.midi or output.get("midi_file")

	if midi_file:
		bpm = automatone.config.read_float(output, "bpm", automatone.constants.timing.DEFAULT_BPM, 1.0, 999.0)
		channel = automatone.config.read_int(output, "channel", 0, 0, 15)
		if not automatone.midi_export.write_midi_file(steps, midi_file, bpm=bpm, channel=channel):
			return 1

	if args.osc or "osc_port" in output:
		broadcaster = automatone.osc.OscBroadcaster(
			host = str(output.get("osc_host", automatone.osc.DEFAULT_HOST)),
			port = automatone.config.read_int(output, "osc_port", automatone.osc.DEFAULT_PORT, 1, 65535),
		)
		broadcaster.broadcast(steps, getattr(engine.last_generator, "cell_changes", ()))

	return 0


if __name__ == "__main__":
	raise SystemExit(main())
