import pathlib
import typing


class RudimentsError (Exception):

	"""
	Base class for every error raised by rudiments.
	"""


class ReadError (RudimentsError):

	"""
	An input file exists but could not be read.
	"""

	def __init__ (self, path: typing.Union[str, pathlib.Path]) -> None:

		self.path = pathlib.Path(path)
		super().__init__(f"I/O error {self.path}")


class ParseError (RudimentsError):

	"""
	A line of a pattern or instrumentation file is malformed.
	"""

	def __init__ (self, line: str) -> None:

		self.line = line
		super().__init__(f"parse error {line}")


class DuplicateInstrumentError (RudimentsError):

	"""
	An instrument is bound to more than one audio file in an instrumentation file.
	"""

	def __init__ (self, instrument: str, message: typing.Optional[str] = None) -> None:

		self.instrument = instrument
		super().__init__(message or f"duplicate instrument {instrument}")


class DuplicatePatternError (DuplicateInstrumentError):

	"""
	More than one step sequence is listed for the same instrument in a pattern file.
	"""

	def __init__ (self, instrument: str, line: str) -> None:

		self.line = line
		super().__init__(instrument, f"duplicate pattern {line}")


class FileDoesNotExistError (RudimentsError, FileNotFoundError):

	"""
	A necessary file (or the samples directory) does not exist.
	"""

	def __init__ (self, path: typing.Union[str, pathlib.Path]) -> None:

		self.path = pathlib.Path(path)
		super().__init__(f"file does not exist {self.path}")


class AudioDecoderError (RudimentsError):

	"""
	An audio sample file could not be decoded.
	"""

	def __init__ (self, path: typing.Union[str, pathlib.Path]) -> None:

		self.path = pathlib.Path(path)
		super().__init__(f"audio decoder error {self.path}")


class AudioDeviceError (RudimentsError):

	"""
	The default audio output device is unavailable.
	"""

	def __init__ (self, detail: typing.Optional[str] = None) -> None:

		self.detail = detail
		super().__init__("audio device error" + (f": {detail}" if detail else ""))
