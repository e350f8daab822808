"""
Tests for tool executors.

Verifies the arithmetic results and every outcome of the HeyGen call.
"""

import httpx
import pytest

from heygen_mcp.config import HeyGenConfig
from heygen_mcp.tools.executors import (
    DIVIDE_BY_ZERO_MESSAGE,
    ToolContext,
    Unrecognized,
    VendorError,
    VideoCreated,
    build_video_request,
    decode_video_response,
    execute_add,
    execute_calculate,
    execute_create_heygen_video,
    format_number,
)
from heygen_mcp.tools.schemas import AddInput, CalculateInput, CreateHeygenVideoInput

from tests.conftest import TEST_API_KEY, StubVendor


def video_input(**overrides) -> CreateHeygenVideoInput:
    values = {"avatar_id": "avatar-1", "voice_id": "voice-1", "input_text": "Hello there"}
    values.update(overrides)
    return CreateHeygenVideoInput(**values)


def vendor_context(vendor: StubVendor, api_key: str = TEST_API_KEY) -> ToolContext:
    return ToolContext(
        secrets={"api_key": api_key},
        heygen=HeyGenConfig(api_key=api_key, base_url="https://api.heygen.com"),
        transport=vendor.transport,
    )


class TestFormatNumber:
    """Number rendering used by the arithmetic tools."""

    def test_integers_render_plainly(self):
        assert format_number(3) == "3"
        assert format_number(-12) == "-12"

    def test_integral_floats_drop_trailing_zero(self):
        assert format_number(2.0) == "2"
        assert format_number(-0.0) == "0"

    def test_fractions_keep_their_digits(self):
        assert format_number(0.5) == "0.5"
        assert format_number(0.1 + 0.2) == "0.30000000000000004"

    def test_special_values(self):
        assert format_number(float("inf")) == "Infinity"
        assert format_number(float("-inf")) == "-Infinity"
        assert format_number(float("nan")) == "NaN"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1e-7, "1e-7"),
            (2.5e-10, "2.5e-10"),
            (-3e-8, "-3e-8"),
            (1e-5, "0.00001"),
            (1.5e-5, "0.000015"),
            (-2.5e-6, "-0.0000025"),
            (1e21, "1e+21"),
            (1.5e300, "1.5e+300"),
        ],
    )
    def test_exponent_notation(self, value, expected):
        assert format_number(value) == expected


class TestAddTool:
    """Test the add executor."""

    @pytest.mark.parametrize(
        "a, b, expected",
        [(1, 2, "3"), (-5, 5, "0"), (1.5, 2.25, "3.75"), (10**20, 1, "100000000000000000001")],
    )
    def test_returns_sum_as_text(self, a, b, expected):
        result = execute_add(AddInput(a=a, b=b), ToolContext())

        assert result.first_text == expected
        assert result.content[0].type == "text"
        assert result.is_error is False

    def test_huge_integer_plus_float_is_infinity(self):
        result = execute_add(AddInput(a=10**400, b=0.5), ToolContext())

        assert result.first_text == "Infinity"

    def test_never_empty(self):
        result = execute_add(AddInput(a=0, b=0), ToolContext())

        assert len(result.content) == 1


class TestCalculateTool:
    """Test the calculate executor."""

    @pytest.mark.parametrize(
        "operation, a, b, expected",
        [
            ("add", 7, 3, "10"),
            ("subtract", 7, 3, "4"),
            ("multiply", 7, 3, "21"),
            ("divide", 7, 2, "3.5"),
            ("divide", 9, 3, "3"),
            ("multiply", 0.5, 0.5, "0.25"),
        ],
    )
    def test_operations(self, operation, a, b, expected):
        result = execute_calculate(CalculateInput(operation=operation, a=a, b=b), ToolContext())

        assert result.first_text == expected

    @pytest.mark.parametrize("a", [0, 1, -42, 3.5])
    def test_divide_by_zero_is_reported_not_raised(self, a):
        """Division by zero is a normal result carrying a message."""
        result = execute_calculate(CalculateInput(operation="divide", a=a, b=0), ToolContext())

        assert result.is_error is False
        assert "Cannot divide by zero" in result.first_text
        assert result.first_text == DIVIDE_BY_ZERO_MESSAGE

    def test_divide_by_float_zero(self):
        result = execute_calculate(CalculateInput(operation="divide", a=1, b=0.0), ToolContext())

        assert result.first_text == DIVIDE_BY_ZERO_MESSAGE

    @pytest.mark.parametrize(
        "operation, a, b, expected",
        [
            ("add", 10**400, 0.5, "Infinity"),
            ("subtract", -(10**400), 0.5, "-Infinity"),
            ("multiply", 10**400, -0.5, "-Infinity"),
            ("divide", 10**400, 3, "Infinity"),
            ("divide", 3, 10**400, "0"),
        ],
    )
    def test_huge_integers_saturate(self, operation, a, b, expected):
        """Ints beyond float range behave like infinity instead of raising."""
        result = execute_calculate(CalculateInput(operation=operation, a=a, b=b), ToolContext())

        assert result.first_text == expected

    def test_huge_integer_arithmetic_stays_exact(self):
        result = execute_calculate(
            CalculateInput(operation="multiply", a=10**200, b=10**200), ToolContext()
        )

        assert result.first_text == "1" + "0" * 400


class TestVideoRequestBody:
    """Test the HeyGen request body shape."""

    def test_body_without_background(self):
        payload = build_video_request(video_input()).to_payload()

        assert payload == {
            "video_inputs": [
                {
                    "character": {
                        "type": "avatar",
                        "avatar_id": "avatar-1",
                        "avatar_style": "normal",
                    },
                    "voice": {"type": "text", "input_text": "Hello there", "voice_id": "voice-1"},
                }
            ],
            "dimension": {"width": 1280, "height": 720},
        }

    def test_background_is_a_color_entry(self):
        payload = build_video_request(video_input(background="#008000")).to_payload()

        assert payload["video_inputs"][0]["background"] == {"type": "color", "value": "#008000"}

    def test_empty_background_is_omitted(self):
        payload = build_video_request(video_input(background="")).to_payload()

        assert "background" not in payload["video_inputs"][0]


class TestDecodeVideoResponse:
    """Test classification of 2xx vendor payloads."""

    def test_video_created(self):
        assert decode_video_response({"data": {"video_id": "v1"}}) == VideoCreated("v1")

    def test_error_field_wins(self):
        outcome = decode_video_response({"error": {"message": "bad"}, "data": {"video_id": "v1"}})

        assert outcome == VendorError({"message": "bad"})

    def test_null_error_is_ignored(self):
        outcome = decode_video_response({"error": None, "data": {"video_id": "v2"}})

        assert outcome == VideoCreated("v2")

    @pytest.mark.parametrize("payload", [[], "ok", {"data": {}}, {"data": None}, {}])
    def test_unexpected_shapes(self, payload):
        assert isinstance(decode_video_response(payload), Unrecognized)


class TestCreateHeygenVideoTool:
    """Test the HeyGen executor against a stubbed endpoint."""

    def test_success_reports_video_id(self):
        vendor = StubVendor(200, {"data": {"video_id": "abc123"}})

        result = execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert result.first_text == "HeyGen video created! video_id: abc123"

    def test_sends_one_post_with_api_key_header(self):
        vendor = StubVendor()

        execute_create_heygen_video(video_input(background="#ffffff"), vendor_context(vendor))

        assert len(vendor.requests) == 1
        request = vendor.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.heygen.com/v2/video/generate"
        assert request.headers["X-Api-Key"] == TEST_API_KEY
        assert request.headers["Content-Type"] == "application/json"
        assert vendor.last_json["video_inputs"][0]["background"]["value"] == "#ffffff"
        assert vendor.last_json["dimension"] == {"width": 1280, "height": 720}

    def test_http_error_status(self):
        vendor = StubVendor(500, "oops")

        result = execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert result.first_text == "HeyGen API error: 500 oops"
        assert result.is_error is False

    def test_unauthorized_status(self):
        vendor = StubVendor(401, '{"message":"invalid key"}')

        result = execute_create_heygen_video(video_input(), vendor_context(vendor, api_key=""))

        assert result.first_text == 'HeyGen API error: 401 {"message":"invalid key"}'

    def test_error_payload_on_success_status(self):
        vendor = StubVendor(200, {"error": {"message": "bad avatar"}})

        result = execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert result.first_text == 'HeyGen API error: {"message":"bad avatar"}'

    def test_unrecognized_payload(self):
        vendor = StubVendor(200, {"data": {"status": "queued"}})

        result = execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert result.first_text.startswith("HeyGen API error: unrecognized response:")
        assert '"status":"queued"' in result.first_text

    def test_malformed_json(self):
        vendor = StubVendor(200, "not json")

        result = execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert result.first_text.startswith("Request failed: ")

    def test_network_failure(self):
        vendor = StubVendor(raise_error=httpx.ConnectError("connection refused"))

        result = execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert result.first_text == "Request failed: connection refused"

    def test_timeout_is_reported_as_request_failure(self):
        vendor = StubVendor(raise_error=httpx.ReadTimeout("timed out"))
        context = ToolContext(
            secrets={"api_key": TEST_API_KEY},
            heygen=HeyGenConfig(api_key=TEST_API_KEY, timeout=0.1),
            transport=vendor.transport,
        )

        result = execute_create_heygen_video(video_input(), context)

        assert result.first_text == "Request failed: timed out"
        assert result.is_error is False
        assert len(vendor.requests) == 1

    def test_no_retry_after_failure(self):
        vendor = StubVendor(503, "busy")

        execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert len(vendor.requests) == 1

    def test_api_key_not_in_result(self):
        """API key should never appear in the result."""
        vendor = StubVendor(200, {"data": {"video_id": "abc123"}})

        result = execute_create_heygen_video(video_input(), vendor_context(vendor))

        assert TEST_API_KEY not in result.first_text
