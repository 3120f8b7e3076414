"""Command line entry point: play a pattern file through an instrumentation.

Usage::

	python -m rudiments --pattern examples/patterns/standard --instrumentation examples/instrumentations/linndrum --samples samples/linndrum --repeat

Defaults for the tempo, repeat switch, samples directory and log level can be
kept in a YAML file (``rudiments.yaml`` in the working directory, or the path
given with ``--config``)::

	playback:
	  tempo: 118
	  repeat: true
	paths:
	  samples: ./samples/linndrum
	logging:
	  level: INFO

Command line flags take precedence over the file.
"""

import argparse
import logging
import os
import sys
import typing

import yaml

import rudiments
import rudiments.constants
import rudiments.errors
import rudiments.instrumentation
import rudiments.pattern
import rudiments.playback
import rudiments.timing


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "rudiments.yaml"


def load_config (config_path: str = DEFAULT_CONFIG_PATH, required: bool = False) -> dict:

	"""
	Load configuration from a YAML file.

	A missing file yields an empty configuration unless ``required`` is set.
	"""

	if not os.path.exists(config_path):
		if required:
			raise rudiments.errors.FileDoesNotExistError(config_path)
		logger.debug(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		config = yaml.safe_load(f) or {}

	if not isinstance(config, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping")

	return config


def config_value (config: dict, section: str, key: str, default: typing.Any = None) -> typing.Any:

	"""
	Look up ``config[section][key]``, tolerating missing sections.
	"""

	return (config.get(section) or {}).get(key, default)


def build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog="rudiments", description="A step-sequencing drum machine")
	parser.add_argument("-p", "--pattern",         metavar="FILE",      required=True, help="Path to pattern file")
	parser.add_argument("-i", "--instrumentation", metavar="FILE",      required=True, help="Path to instrumentation file")
	parser.add_argument("-s", "--samples",         metavar="DIRECTORY", default=None,  help="Search path for sample files")
	parser.add_argument("-t", "--tempo",           metavar="NUMBER",    type=int, default=None, help=f"Playback tempo (default: {rudiments.constants.DEFAULT_TEMPO})")
	parser.add_argument("-r", "--repeat",          action="store_true", default=None, help="Repeat the pattern until stopped")
	parser.add_argument("-c", "--config",          metavar="FILE",      default=None,  help=f"YAML configuration file (default: {DEFAULT_CONFIG_PATH})")
	parser.add_argument("--log-level",             default=None,        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level (default: INFO)")
	parser.add_argument("-V", "--version",         action="version",    version=f"%(prog)s {rudiments.__version__}")

	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the rudiments application. Returns the process exit status.
	"""

	parser = build_parser()
	args = parser.parse_args(argv)

	logging.basicConfig(level=args.log_level or logging.INFO, format="%(levelname)s [%(name)s] %(message)s")

	try:
		config = load_config(args.config or DEFAULT_CONFIG_PATH, required=args.config is not None)

		if args.log_level is None:
			logging.getLogger().setLevel(str(config_value(config, "logging", "level", "INFO")).upper())

		tempo = args.tempo if args.tempo is not None else config_value(config, "playback", "tempo", rudiments.constants.DEFAULT_TEMPO)
		repeat = args.repeat if args.repeat is not None else bool(config_value(config, "playback", "repeat", False))
		samples = args.samples or config_value(config, "paths", "samples")

		if samples is None:
			parser.error("the following arguments are required: -s/--samples")

		pattern = rudiments.pattern.Pattern.parse(args.pattern)
		instrumentation = rudiments.instrumentation.Instrumentation.parse(args.instrumentation)

		rudiments.playback.play(
			pattern,
			instrumentation,
			samples,
			rudiments.timing.Tempo(tempo),
			repeat
		)

	except (rudiments.errors.RudimentsError, ValueError, yaml.YAMLError) as e:
		logger.error(f"{e}")
		return 1

	except KeyboardInterrupt:
		logger.info("Stopping...")

	return 0


if __name__ == "__main__":
	sys.exit(main())
