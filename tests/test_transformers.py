"""Tests for the key transformers."""

import fnmatch

import pytest

from shardmigrate.exceptions import MalformedKeyError
from shardmigrate.transformers import (
    DndTransformer,
    NumbersTransformer,
    RateLimitPassthroughTransformer,
    RateLimitTransformer,
    SandboxTransformer,
    SenderIdTransformer,
    SmsPrefixTransformer,
    hash_tag,
)


class TestHashTag:
    """Test hash tag construction."""

    def test_single_field(self):
        assert hash_tag("12345") == "{12345}"

    def test_multiple_fields_joined_with_separator(self):
        assert hash_tag("LC", "US_CANADA", "US_CANADA") == "{LC:US_CANADA:US_CANADA}"


class TestSenderIdTransformer:
    """Test the senderid family."""

    def test_pattern(self):
        assert SenderIdTransformer().pattern() == "senderid:*"

    def test_default_sender(self):
        assert SenderIdTransformer().transform("senderid:1:default:7") == "senderid:1:{default}:7"

    def test_account_sender(self):
        result = SenderIdTransformer().transform("senderid:91:MAXXXXXXXXXXXXXXXXXX:12")
        assert result == "senderid:91:{MAXXXXXXXXXXXXXXXXXX}:12"

    @pytest.mark.parametrize("key", [
        "senderid:1:default",
        "senderid:1:default:7:extra",
        "senderid",
        "senderid:1::7",
    ])
    def test_malformed(self, key):
        with pytest.raises(MalformedKeyError) as exc_info:
            SenderIdTransformer().transform(key)

        assert exc_info.value.key == key
        assert exc_info.value.expected_fields == 4


class TestRateLimitTransformer:
    """Test the hash-tagged rate limit family."""

    def test_pattern(self):
        assert RateLimitTransformer().pattern() == "sms_rate_limit:*"

    def test_transform(self):
        result = RateLimitTransformer().transform("sms_rate_limit:MPS:LC:US_CANADA:US_CANADA")
        assert result == "sms_rate_limit:MPS:{LC:US_CANADA:US_CANADA}"

    def test_malformed(self):
        with pytest.raises(MalformedKeyError):
            RateLimitTransformer().transform("sms_rate_limit:MPS:LC:US_CANADA")


class TestRateLimitPassthroughTransformer:
    """Test the pass-through rate limit family."""

    def test_same_pattern_as_hash_tagged_variant(self):
        assert RateLimitPassthroughTransformer().pattern() == RateLimitTransformer().pattern()

    def test_key_unchanged(self):
        key = "sms_rate_limit:MPS:LC:US_CANADA:US_CANADA"
        assert RateLimitPassthroughTransformer().transform(key) == key

    def test_accepts_any_shape(self):
        assert RateLimitPassthroughTransformer().transform("sms_rate_limit:x") == "sms_rate_limit:x"


class TestDndTransformer:
    """Test the STOP (do-not-disturb) family."""

    def test_pattern(self):
        assert DndTransformer().pattern() == "stop*"

    def test_transform(self):
        assert DndTransformer().transform("stop:5:9") == "stop:5:{9}"

    def test_powerpack_source(self):
        assert DndTransformer().transform("stop:pp-uuid:14155550100") == "stop:pp-uuid:{14155550100}"

    @pytest.mark.parametrize("key", ["stop:5", "stop:5:9:1", "stopall"])
    def test_malformed(self, key):
        with pytest.raises(MalformedKeyError):
            DndTransformer().transform(key)


class TestSmsPrefixTransformer:
    """Test the fixed-name prefix table."""

    def test_pattern(self):
        assert SmsPrefixTransformer().pattern() == "smsprefixes"

    def test_fixed_destination(self):
        assert SmsPrefixTransformer().transform("smsprefixes") == "smsprefixes"


class TestNumbersTransformer:
    """Test the numbers family."""

    def test_pattern(self):
        assert NumbersTransformer().pattern() == "numbers:*"

    def test_transform(self):
        assert NumbersTransformer().transform("numbers:12345") == "numbers:{12345}"

    def test_single_field_is_malformed(self):
        with pytest.raises(MalformedKeyError):
            NumbersTransformer().transform("numbers:")

    def test_bare_prefix_is_malformed(self):
        with pytest.raises(MalformedKeyError):
            NumbersTransformer().transform("numbers")

    def test_too_many_fields_is_malformed(self):
        with pytest.raises(MalformedKeyError):
            NumbersTransformer().transform("numbers:1:2")


class TestSandboxTransformer:
    """Test the sandbox family."""

    def test_pattern(self):
        assert SandboxTransformer().pattern() == "sandbox:*"

    def test_transform(self):
        assert SandboxTransformer().transform("sandbox:MA123") == "sandbox:{MA123}"

    def test_malformed(self):
        with pytest.raises(MalformedKeyError):
            SandboxTransformer().transform("sandbox:MA123:extra")


class TestTransformerProperties:
    """Properties every transformer must hold."""

    CASES = [
        (SenderIdTransformer(), "senderid:1:default:7"),
        (RateLimitTransformer(), "sms_rate_limit:MPS:LC:US_CANADA:US_CANADA"),
        (DndTransformer(), "stop:5:9"),
        (SmsPrefixTransformer(), "smsprefixes"),
        (NumbersTransformer(), "numbers:12345"),
        (SandboxTransformer(), "sandbox:MA123"),
    ]

    @pytest.mark.parametrize("transformer,key", CASES)
    def test_sample_key_matches_pattern(self, transformer, key):
        assert fnmatch.fnmatchcase(key, transformer.pattern())

    @pytest.mark.parametrize("transformer,key", CASES)
    def test_deterministic(self, transformer, key):
        assert transformer.transform(key) == transformer.transform(key)

    def test_repr_includes_pattern(self):
        assert "numbers:*" in repr(NumbersTransformer())
