"""
Unit tests for canonical JSON hashing utility.

Tests deterministic fingerprints of analysis inputs.
"""

from src.utils.canonical_hash import canonical_json_hash, canonical_json_string, input_fingerprint


class TestCanonicalJsonHash:
    """Test cases for canonical_json_hash function."""

    def test_basic_hash(self):
        """Test basic dictionary hashing."""
        result = canonical_json_hash({"a": 1, "b": 2})
        assert len(result) == 64  # SHA-256 hex length
        assert result == "43258cff783fe7036d8a43033f830adfc60ec037382473548ac742b888292777"

    def test_key_order_independence(self):
        assert canonical_json_hash({"a": 1, "b": 2}) == canonical_json_hash({"b": 2, "a": 1})

    def test_nested_dict_sorting(self):
        hash1 = canonical_json_hash({"outer": {"z": 1, "a": 2}})
        hash2 = canonical_json_hash({"outer": {"a": 2, "z": 1}})
        assert hash1 == hash2

    def test_different_values_different_hash(self):
        assert canonical_json_hash({"a": 1}) != canonical_json_hash({"a": 2})

    def test_string_and_bytes_input(self):
        """Pre-serialized canonical JSON hashes like the dict it encodes."""
        expected = canonical_json_hash({"a": 1, "b": 2})
        assert canonical_json_hash('{"a":1,"b":2}') == expected
        assert canonical_json_hash(b'{"a":1,"b":2}') == expected

    def test_canonical_string(self):
        assert canonical_json_string({"b": 2, "a": None}) == '{"a":null,"b":2}'
        assert canonical_json_string({}) == "{}"


class TestInputFingerprint:
    """Test the short request fingerprint."""

    def test_prefix_of_full_hash(self):
        obj = {"decision": {"id": "d-1"}}
        assert input_fingerprint(obj) == canonical_json_hash(obj)[:16]

    def test_stable_for_model_dump(self, strike_decision):
        first = input_fingerprint(strike_decision.model_dump(mode="json"))
        second = input_fingerprint(strike_decision.model_copy(deep=True).model_dump(mode="json"))
        assert first == second
