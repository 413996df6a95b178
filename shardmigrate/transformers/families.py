"""Transformers for the key families stored in the source instance."""

from .base import BaseKeyTransformer, SEPARATOR, hash_tag


class SenderIdTransformer(BaseKeyTransformer):
    """
    Sender ID lookups.

    senderid:<country_id>:<auth_id>:<carrier_id>
    senderid:<country_id>:default:<carrier_id>

    The account (or "default") is the hash tag, so every sender ID entry of
    an account lands on the same shard.
    """

    name = "senderid"
    expected_fields = 4

    def pattern(self) -> str:
        return "senderid:*"

    def transform(self, key: str) -> str:
        prefix, country_id, auth_id, carrier_id = self.split(key)
        return SEPARATOR.join([prefix, country_id, hash_tag(auth_id), carrier_id])


class RateLimitTransformer(BaseKeyTransformer):
    """
    SMS rate limit counters.

    sms_rate_limit:MPS:LC:US_CANADA:US_CANADA -> sms_rate_limit:MPS:{LC:US_CANADA:US_CANADA}
    """

    name = "ratelimit"
    expected_fields = 5

    def pattern(self) -> str:
        return "sms_rate_limit:*"

    def transform(self, key: str) -> str:
        prefix, kind, number_type, src_region, dst_region = self.split(key)
        return SEPARATOR.join([prefix, kind, hash_tag(number_type, src_region, dst_region)])


class RateLimitPassthroughTransformer(BaseKeyTransformer):
    """Rate limit counters copied under their original name."""

    name = "ratelimit-passthrough"

    def pattern(self) -> str:
        return "sms_rate_limit:*"

    def transform(self, key: str) -> str:
        return key


class DndTransformer(BaseKeyTransformer):
    """
    Do-not-disturb (STOP) opt-outs.

    stop:<src number or powerpack>:<destination number>
    """

    name = "dnd"
    expected_fields = 3

    def pattern(self) -> str:
        return "stop*"

    def transform(self, key: str) -> str:
        prefix, source, destination = self.split(key)
        return SEPARATOR.join([prefix, source, hash_tag(destination)])


class SmsPrefixTransformer(BaseKeyTransformer):
    """The single prefix table key; it keeps a fixed name."""

    name = "smsprefixes"

    def pattern(self) -> str:
        return "smsprefixes"

    def transform(self, key: str) -> str:
        return "smsprefixes"


class NumbersTransformer(BaseKeyTransformer):
    """numbers:<auth_id> -> numbers:{<auth_id>}"""

    name = "numbers"
    expected_fields = 2

    def pattern(self) -> str:
        return "numbers:*"

    def transform(self, key: str) -> str:
        prefix, auth_id = self.split(key)
        return SEPARATOR.join([prefix, hash_tag(auth_id)])


class SandboxTransformer(BaseKeyTransformer):
    """sandbox:<auth_id> -> sandbox:{<auth_id>}"""

    name = "sandbox"
    expected_fields = 2

    def pattern(self) -> str:
        return "sandbox:*"

    def transform(self, key: str) -> str:
        prefix, auth_id = self.split(key)
        return SEPARATOR.join([prefix, hash_tag(auth_id)])
