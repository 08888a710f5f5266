"""
Tests for delimiter resolution, header tokenizers and routing key extraction.
"""

import pytest

from ediroute.envelope import (
    Dialect,
    EdifactDelimiters,
    EdifactHeaderTokenizer,
    RoutingKey,
    X12Delimiters,
    X12HeaderTokenizer,
    extract_edifact_key,
    extract_routing_key,
    extract_x12_key,
    resolve_edifact_delimiters,
    resolve_x12_delimiters,
)
from ediroute.envelope.tokenizer import (
    DEFAULT_EDIFACT_PATTERNS,
    DEFAULT_X12_PATTERNS,
    edifact_patterns,
    x12_patterns,
)
from ediroute.errors import DialectUnknownError, HeaderError, HeaderErrorKind

from conftest import EDIFACT_HEADER_SAMPLE, ISA_HEADER, X12_GROUP_SAMPLE, X12_HEADER_SAMPLE


class TestDelimiterResolution:
    """Separators declared in interchange headers."""

    def test_x12_from_isa(self):
        delimiters = resolve_x12_delimiters(ISA_HEADER)
        assert delimiters == X12Delimiters(element="*", component=">", segment="~")

    def test_x12_custom_isa(self):
        isa = ISA_HEADER.replace("*", "|").replace(">~", "^\n")
        delimiters = resolve_x12_delimiters(isa)
        assert delimiters == X12Delimiters(element="|", component="^", segment="\n")

    def test_x12_defaults_without_isa(self):
        assert resolve_x12_delimiters(X12_GROUP_SAMPLE) == X12Delimiters()

    def test_x12_defaults_on_truncated_isa(self):
        assert resolve_x12_delimiters("ISA*00*   *00") == X12Delimiters()

    def test_edifact_defaults_without_una(self):
        assert resolve_edifact_delimiters(EDIFACT_HEADER_SAMPLE) == EdifactDelimiters()

    def test_edifact_from_una(self):
        delimiters = resolve_edifact_delimiters("UNA|^,? !UNB^UNOC|3!")
        assert delimiters.component == "|"
        assert delimiters.element == "^"
        assert delimiters.decimal == ","
        assert delimiters.release == "?"
        assert delimiters.segment == "!"

    def test_edifact_una_without_release(self):
        delimiters = resolve_edifact_delimiters("UNA:+.  'UNB+UNOC:3'")
        assert delimiters.release is None

    def test_edifact_standard_una(self):
        assert resolve_edifact_delimiters("UNA:+.? 'UNB+UNOC:3'") == EdifactDelimiters()

    @pytest.mark.parametrize("text", ["UNA:+", "UNA::::::", "UNAab.? c"])
    def test_edifact_unusable_una_falls_back(self, text):
        assert resolve_edifact_delimiters(text) == EdifactDelimiters()


class TestTokenizers:
    """Header sniffing without the document grammar."""

    def test_default_patterns_compiled_once(self):
        assert x12_patterns(X12Delimiters()) is DEFAULT_X12_PATTERNS
        assert edifact_patterns(EdifactDelimiters()) is DEFAULT_EDIFACT_PATTERNS

    def test_x12_group_header(self):
        gs = X12HeaderTokenizer(X12_GROUP_SAMPLE).group_header()
        assert gs.tag == "GS"
        assert gs.element(8) == "004010"
        assert gs.offset == 0

    def test_x12_group_header_requires_following_st(self):
        """A GS without an ST after it is not a usable anchor."""
        assert X12HeaderTokenizer(X12_HEADER_SAMPLE).group_header() is None

    def test_x12_group_header_on_single_line(self):
        text = "ISA*00~GS*IO*S*T*20220101*1449*1*X*005010~ST*834*1~BGN*00~"
        assert X12HeaderTokenizer(text).group_header().element(8) == "005010"

    def test_x12_transaction_header(self):
        st = X12HeaderTokenizer(X12_GROUP_SAMPLE).transaction_header()
        assert st.elements == ("ST", "310", "35353")

    def test_x12_tag_must_open_segment(self):
        """ST inside an element value is not a transaction header."""
        text = "GS*IO*FIRST*ST*20220101*1449*1*X*004010~\nST*204*0001~"
        st = X12HeaderTokenizer(text).transaction_header()
        assert st.element(1) == "204"

    def test_x12_crlf_between_segments(self):
        text = "GS*IO*S*T*20220101*1449*1*X*004010~\r\nST*315*0001~\r\n"
        tokenizer = X12HeaderTokenizer(text)
        assert tokenizer.group_header().element(8) == "004010"
        assert tokenizer.transaction_header().element(1) == "315"

    def test_element_out_of_range(self):
        st = X12HeaderTokenizer("ST*310~").transaction_header()
        assert st.element(5) is None
        assert len(st) == 2

    def test_edifact_split_on_both_separators(self):
        unh = EdifactHeaderTokenizer(EDIFACT_HEADER_SAMPLE).message_header()
        assert unh.elements == ("UNH", "2805567", "IFTSTA", "D", "00B", "UN")

    def test_edifact_release_character(self):
        tokenizer = EdifactHeaderTokenizer("UNB+UNOC:3'UNH+A?+B?'C+ORDERS:D:96A:UN'")
        unh = tokenizer.message_header()
        assert unh.elements == ("UNH", "A+B'C", "ORDERS", "D", "96A", "UN")

    def test_edifact_unterminated_header(self):
        text = "UNA:+.? 'UNB+UNOC:3+SENDER+CRECEIVER+221121:1422+1291'UNH+"
        assert EdifactHeaderTokenizer(text).message_header() is None

    def test_edifact_header_must_open_segment(self):
        """UNH inside another segment's data is skipped."""
        text = "UNB+UNOC:3+SNDR+RCVR+221121:1422+1'FTX+AAI+UNH+NOTE'UNH+7+IFTSTA:D:00B:UN'"
        unh = EdifactHeaderTokenizer(text).message_header()
        assert unh.elements == ("UNH", "7", "IFTSTA", "D", "00B", "UN")


class TestX12Extraction:
    """GS08 / ST01 routing keys."""

    def test_group_sample(self):
        key = extract_x12_key(X12_GROUP_SAMPLE)
        assert key == RoutingKey(Dialect.X12, "004010", "310")
        assert str(key) == "004010/310"

    def test_full_document(self, x12_310_text):
        assert str(extract_x12_key(x12_310_text)) == "004010/310"

    def test_single_line_document(self, x12_834_path):
        text = x12_834_path.read_text(encoding="utf-8")
        assert str(extract_x12_key(text)) == "005010/834"

    def test_first_match_wins(self):
        text = (
            X12_GROUP_SAMPLE + "\nSE*2*35353~\nGE*1*61716~\n"
            "GS*IO*A*B*20220101*1449*2*X*005010~\nST*834*1~"
        )
        assert str(extract_x12_key(text)) == "004010/310"

    def test_custom_delimiters(self):
        isa = ISA_HEADER.replace("*", "|").replace(">~", "^!")
        text = isa + "GS|IO|S|T|20220101|1449|1|X|004010!ST|404|0001!"
        assert str(extract_x12_key(text)) == "004010/404"

    def test_missing_group_header(self):
        with pytest.raises(HeaderError) as exc_info:
            extract_x12_key(X12_HEADER_SAMPLE)
        assert exc_info.value.kind is HeaderErrorKind.MISSING_GROUP_HEADER

    def test_missing_transaction_header(self):
        """The GS anchor needs an ST tag after it, but not a terminated ST segment."""
        with pytest.raises(HeaderError) as exc_info:
            extract_x12_key("GS*IO*S*T*20220101*1449*1*X*004010~\nST*")
        assert exc_info.value.kind is HeaderErrorKind.MISSING_TRANSACTION_HEADER

    def test_short_group_header(self):
        with pytest.raises(HeaderError) as exc_info:
            extract_x12_key("GS*IO*S*T~\nST*310*1~")
        assert exc_info.value.kind is HeaderErrorKind.TRUNCATED_HEADER

    def test_version_is_not_normalized(self):
        key = extract_x12_key("GS*IO*S*T*20220101*1449*1*X* 004010 ~\nST*310*1~")
        assert key.version == " 004010 "


class TestEdifactExtraction:
    """UNH routing keys."""

    def test_header_sample(self):
        key = extract_edifact_key(EDIFACT_HEADER_SAMPLE)
        assert key == RoutingKey(Dialect.EDIFACT, "D00B", "IFTSTA")
        assert str(key) == "D00B/IFTSTA"

    def test_full_document(self, edifact_path):
        text = edifact_path.read_text(encoding="utf-8")
        assert str(extract_edifact_key(text)) == "D00B/IFTSTA"

    def test_una_redefined_delimiters(self, edifact_una_path):
        text = edifact_una_path.read_text(encoding="utf-8")
        assert str(extract_edifact_key(text)) == "D96B/CUSCAR"

    def test_single_line_cuscar(self):
        text = (
            "UNB+UNOC:3+HKGHKG999+BLI-CUS+221121:0430+336'UNH+321+CUSCAR:D:96B:UN'"
            "BGM+85+CUSCAR/202211210430/+9'DTM+137:202211210430:203'RFF+AAZ:SUDU'"
            "NAD+MS+HSA'CTA+IC+:DAVID ZHANG/852-34788102'NAD+BA+HSA'"
            "EQD+CN+GLDU5592412::ZZZ+22G1++"
        )
        assert str(extract_edifact_key(text)) == "D96B/CUSCAR"

    def test_missing_message_header(self):
        with pytest.raises(HeaderError) as exc_info:
            extract_edifact_key("UNB+UNOC:3+SNDR+RCVR+221121:1422+1291'UNH+")
        assert exc_info.value.kind is HeaderErrorKind.MISSING_MESSAGE_HEADER

    def test_short_message_identifier(self):
        with pytest.raises(HeaderError) as exc_info:
            extract_edifact_key("UNB+UNOC:3'UNH+1+IFTSTA:D'")
        assert exc_info.value.kind is HeaderErrorKind.TRUNCATED_HEADER


class TestExtractRoutingKey:
    """Dialect dispatch."""

    def test_x12(self):
        assert extract_routing_key(Dialect.X12, X12_GROUP_SAMPLE).dialect is Dialect.X12

    def test_edifact(self):
        assert extract_routing_key(Dialect.EDIFACT, EDIFACT_HEADER_SAMPLE).dialect is Dialect.EDIFACT

    def test_unknown_rejected(self):
        with pytest.raises(DialectUnknownError):
            extract_routing_key(Dialect.UNKNOWN, X12_GROUP_SAMPLE)

    def test_keys_compare_exactly(self):
        assert RoutingKey(Dialect.X12, "004010", "310") != RoutingKey(Dialect.X12, "4010", "310")
        assert RoutingKey(Dialect.X12, "004010", "310") != RoutingKey(Dialect.EDIFACT, "004010", "310")
