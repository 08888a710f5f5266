"""
Conversion Dispatcher

Drives one command through the routing pipeline:

    DETECTING -> DECODING -> CLASSIFYING -> EXTRACTING_KEY -> LOOKING_UP
              -> INVOKING -> DONE

Any EdiRouteError moves the run straight to FAILED and skips the remaining
stages. Nothing is retried; the same input always takes the same path.
The result carries either complete output or the error, never both.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Optional, Tuple

from ediroute.envelope.decoder import Encoding, decode_bytes
from ediroute.envelope.dialect import Dialect, detect_dialect
from ediroute.envelope.headers import RoutingKey, extract_routing_key
from ediroute.errors import (
    DialectUnknownError,
    EdiRouteError,
    NotSupportedError,
    StructuredShapeError,
)
from ediroute.registry import REGISTRY, Capability, CapabilityRegistry
from ediroute.structured import dump_structured, load_structured, probe_dialect, probe_x12_key


logger = logging.getLogger(__name__)


class Stage(Enum):
    """Pipeline stages; DONE and FAILED are terminal."""
    DETECTING = auto()
    DECODING = auto()
    CLASSIFYING = auto()
    EXTRACTING_KEY = auto()
    LOOKING_UP = auto()
    INVOKING = auto()
    DONE = auto()
    FAILED = auto()


@dataclass
class ConversionResult:
    """Outcome of one dispatcher run."""
    command: str
    stage: Stage
    output: Optional[str] = None
    error: Optional[EdiRouteError] = None
    failed_stage: Optional[Stage] = None
    dialect: Optional[Dialect] = None
    key: Optional[RoutingKey] = None
    encoding: Optional[Encoding] = None

    @property
    def success(self) -> bool:
        return self.stage is Stage.DONE


class _Run:
    """Tracks the stage of a single command run."""

    def __init__(self, command: str):
        self.command = command
        self.stage = Stage.DETECTING
        self.dialect: Optional[Dialect] = None
        self.key: Optional[RoutingKey] = None
        self.encoding: Optional[Encoding] = None

    def advance(self, stage: Stage) -> None:
        logger.debug("%s: %s -> %s", self.command, self.stage.name, stage.name)
        self.stage = stage

    def _result(self, stage: Stage, **kwargs) -> ConversionResult:
        return ConversionResult(
            command=self.command,
            stage=stage,
            dialect=self.dialect,
            key=self.key,
            encoding=self.encoding,
            **kwargs,
        )

    def done(self, output: str) -> ConversionResult:
        self.advance(Stage.DONE)
        return self._result(Stage.DONE, output=output)

    def fail(self, error: EdiRouteError) -> ConversionResult:
        logger.debug("%s failed in %s: %s", self.command, self.stage.name, error)
        return self._result(Stage.FAILED, error=error, failed_stage=self.stage)


class ConversionDispatcher:
    """
    Runs the encoding, type, edi2json and json2edi commands.

    Usage:
        dispatcher = ConversionDispatcher()
        result = dispatcher.run("edi2json", data)
        if result.success:
            print(result.output)
    """

    def __init__(self, registry: CapabilityRegistry = REGISTRY, json_indent: Optional[int] = None):
        self.registry = registry
        self.json_indent = json_indent
        self._commands: Dict[str, Callable[[bytes], ConversionResult]] = {
            "encoding": self.encoding,
            "type": self.message_type,
            "edi2json": self.edi_to_json,
            "json2edi": self.json_to_edi,
        }

    @property
    def commands(self) -> Tuple[str, ...]:
        return tuple(self._commands)

    def run(self, command: str, data: bytes) -> ConversionResult:
        try:
            handler = self._commands[command]
        except KeyError:
            raise ValueError(f"unknown command {command!r}") from None
        return handler(data)

    # =========================================================================
    # Shared stages
    # =========================================================================

    def _decode(self, run: _Run, data: bytes) -> str:
        run.advance(Stage.DECODING)
        decoded = decode_bytes(data)
        run.encoding = decoded.encoding
        return decoded.text

    def _classify(self, run: _Run, text: str, require_known: bool = True) -> Dialect:
        run.advance(Stage.CLASSIFYING)
        run.dialect = detect_dialect(text)
        if require_known and run.dialect is Dialect.UNKNOWN:
            raise DialectUnknownError()
        return run.dialect

    def _extract(self, run: _Run, dialect: Dialect, text: str) -> RoutingKey:
        run.advance(Stage.EXTRACTING_KEY)
        run.key = extract_routing_key(dialect, text)
        return run.key

    def _lookup(self, run: _Run, key: RoutingKey) -> Capability:
        run.advance(Stage.LOOKING_UP)
        return self.registry.lookup(key)

    # =========================================================================
    # Commands
    # =========================================================================

    def encoding(self, data: bytes) -> ConversionResult:
        """Report the dialect as X12, EDIFACT or UNKNOWN."""
        run = _Run("encoding")
        text = self._decode(run, data)
        dialect = self._classify(run, text, require_known=False)
        return run.done(str(dialect))

    def message_type(self, data: bytes) -> ConversionResult:
        """Report the routing key as version/type."""
        run = _Run("type")
        try:
            text = self._decode(run, data)
            dialect = self._classify(run, text)
            key = self._extract(run, dialect, text)
        except EdiRouteError as e:
            return run.fail(e)
        return run.done(str(key))

    def edi_to_json(self, data: bytes) -> ConversionResult:
        """Parse an EDI document with the capability its header selects."""
        run = _Run("edi2json")
        try:
            text = self._decode(run, data)
            dialect = self._classify(run, text)
            key = self._extract(run, dialect, text)
            capability = self._lookup(run, key)
            run.advance(Stage.INVOKING)
            value = capability.parse(text)
            output = dump_structured(value, indent=self.json_indent)
        except EdiRouteError as e:
            return run.fail(e)
        return run.done(output)

    def json_to_edi(self, data: bytes) -> ConversionResult:
        """Serialize a structured document with the capability its routing fields select."""
        run = _Run("json2edi")
        try:
            text = self._decode(run, data)
            value = load_structured(text)
            run.advance(Stage.CLASSIFYING)
            run.dialect = probe_dialect(value)
            if run.dialect is Dialect.EDIFACT:
                raise NotSupportedError("json2edi", Dialect.EDIFACT)
            if run.dialect is Dialect.UNKNOWN:
                raise StructuredShapeError(
                    "structured document carries no interchange header (isa)"
                )
            run.advance(Stage.EXTRACTING_KEY)
            run.key = probe_x12_key(value)
            capability = self._lookup(run, run.key)
            run.advance(Stage.INVOKING)
            output = capability.serialize(value)
        except EdiRouteError as e:
            return run.fail(e)
        return run.done(output)


def dispatch(command: str, data: bytes, **kwargs: Any) -> ConversionResult:
    """Run one command with a default dispatcher."""
    return ConversionDispatcher(**kwargs).run(command, data)
