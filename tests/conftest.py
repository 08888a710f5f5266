"""
Pytest configuration and shared fixtures.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ediroute.dispatcher import ConversionDispatcher


# =============================================================================
# SAMPLE DOCUMENTS
# =============================================================================

ISA_HEADER = (
    "ISA*00*          *00*          *ZZ*SOURCE         *02*TARGET         "
    "*220101*1449*U*00401*000011566*0*P*>~"
)

X12_HEADER_SAMPLE = (
    ISA_HEADER + "\n"
    "GS*IO*SOURCE*TARGET*20220101*1449*61716*X*004010~"
)

X12_GROUP_SAMPLE = (
    "GS*IO*SOURCE*TARGET*20220101*1449*61716*X*004010~\n"
    "ST*310*35353~"
)

EDIFACT_HEADER_SAMPLE = (
    "UNB+UNOC:2+SENDER:ZZZ+RECEIVER:ZZZ+220101:1021+2803570'\n"
    "UNH+2805567+IFTSTA:D:00B:UN'"
)


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def x12_310_path(fixtures_dir):
    return fixtures_dir / "x12_310_004010.edi"


@pytest.fixture
def x12_834_path(fixtures_dir):
    return fixtures_dir / "x12_834_005010.edi"


@pytest.fixture
def x12_pipe_path(fixtures_dir):
    return fixtures_dir / "x12_310_pipe_delimited.edi"


@pytest.fixture
def edifact_path(fixtures_dir):
    return fixtures_dir / "edifact_iftsta_d00b.edi"


@pytest.fixture
def edifact_una_path(fixtures_dir):
    return fixtures_dir / "edifact_una_cuscar_d96b.edi"


@pytest.fixture
def x12_310_text(x12_310_path):
    return x12_310_path.read_text(encoding="utf-8")


# =============================================================================
# HELPERS
# =============================================================================

@pytest.fixture(autouse=True)
def reset_ediroute_logging():
    """Drop handlers the CLI installs so later tests log through caplog."""
    yield
    logger = logging.getLogger("ediroute")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def dispatcher():
    return ConversionDispatcher()


def make_x12(version: str, message_type: str, body: str = "N9*BM*REF1~\n") -> str:
    """Build a minimal single-transaction X12 interchange."""
    return (
        f"{ISA_HEADER}\n"
        f"GS*IO*SOURCE*TARGET*20220101*1449*61716*X*{version}~\n"
        f"ST*{message_type}*0001~\n"
        f"{body}"
        "SE*3*0001~\n"
        "GE*1*61716~\n"
        "IEA*1*000011566~\n"
    )
