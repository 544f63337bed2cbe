"""
Ethereum personal_sign verification.

Recovers the signer of an EIP-191 "personal message" signature and reports a
boolean verdict. Parsing and recovery return explicit result objects: a bad
signature is a normal outcome (``is_valid=False`` plus a ``reason`` code), not
an exception. Only the named errors raised by the secp256k1 backend are caught
around recovery; anything else is a genuine fault and propagates.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from eth_account.messages import _hash_eip191_message, encode_defunct
from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import is_checksum_address, is_checksum_formatted_address, is_hex_address, keccak

from web3auth.utils import add_hex_prefix, validate_hex_format

logger = logging.getLogger(__name__)

SIGNATURE_HEX_LENGTH = 130

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# Failure reasons carried by SignatureCheck / VerificationResult
EMPTY_MESSAGE = "empty_message"
MALFORMED_SIGNATURE = "malformed_signature"
INVALID_V = "invalid_v"
INVALID_RS = "invalid_rs"
RECOVERY_FAILED = "recovery_failed"
SIGNER_MISMATCH = "signer_mismatch"


@dataclass(frozen=True)
class ParsedSignature:
    """A 65 byte signature split into its components; ``v`` is the 0/1 recovery id."""

    r: int
    s: int
    v: int
    raw: bytes


@dataclass(frozen=True)
class SignatureCheck:
    """Outcome of ``parse_signature``: either a parsed signature or an error code."""

    signature: Optional[ParsedSignature] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.signature is not None


@dataclass(frozen=True)
class VerificationResult:
    """Verdict for one (message, signature) pair.

    ``signer`` is set if and only if ``is_valid`` is true. ``reason`` names the
    failing step for logs and is never part of the wire format.
    """

    is_valid: bool
    signer: Optional[str]
    original_message: str
    reason: Optional[str] = None

    @classmethod
    def valid(cls, signer: str, message: str) -> "VerificationResult":
        return cls(is_valid=True, signer=signer, original_message=message)

    @classmethod
    def invalid(cls, message: str, reason: str) -> "VerificationResult":
        return cls(is_valid=False, signer=None, original_message=message, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "signer": self.signer,
            "originalMessage": self.original_message,
        }


def normalize_signature(signature: str) -> str:
    """Trim whitespace and make sure the signature carries a ``0x`` prefix."""
    return add_hex_prefix(signature.strip())


def parse_signature(signature: str) -> SignatureCheck:
    """
    Validate and split a hex signature.

    Args:
        signature: Hex string of r || s || v, with or without ``0x``

    Returns:
        SignatureCheck holding the ParsedSignature, or the reason it was rejected
    """
    if not isinstance(signature, str):
        return SignatureCheck(error=MALFORMED_SIGNATURE)

    normalized = normalize_signature(signature)
    if not validate_hex_format(normalized[2:], SIGNATURE_HEX_LENGTH):
        return SignatureCheck(error=MALFORMED_SIGNATURE)

    raw = bytes.fromhex(normalized[2:])
    r = int.from_bytes(raw[0:32], "big")
    s = int.from_bytes(raw[32:64], "big")
    v = raw[64]

    # wallets emit 27/28, some libraries the bare recovery id,
    # EIP-155 style values map by parity (odd is 27)
    if v in (27, 28):
        v -= 27
    elif v >= 35:
        v = 0 if v & 1 else 1
    elif v not in (0, 1):
        return SignatureCheck(error=INVALID_V)

    # top bit of s set is non-canonical
    if raw[32] & 0x80:
        return SignatureCheck(error=INVALID_RS)

    if not (0 < r < SECP256K1_N and 0 < s < SECP256K1_N):
        return SignatureCheck(error=INVALID_RS)

    return SignatureCheck(signature=ParsedSignature(r=r, s=s, v=v, raw=raw))


def personal_message_hash(message: str) -> bytes:
    """keccak256 of the EIP-191 prefixed message (length is in UTF-8 bytes)."""
    return _hash_eip191_message(encode_defunct(text=message))


def recover_address(message_hash: bytes, parsed: ParsedSignature) -> Optional[str]:
    """
    Recover the lowercase signer address from a digest and parsed signature.

    Returns:
        ``0x``-prefixed lowercase address, or None if no public key can be recovered
    """
    try:
        signature = keys.Signature(vrs=(parsed.v, parsed.r, parsed.s))
        public_key = signature.recover_public_key_from_msg_hash(message_hash)
    except (BadSignature, KeyValidationError) as e:
        logger.debug(f"Public key recovery failed: {e}")
        return None

    # last 20 bytes of keccak over the 64 byte uncompressed key
    return "0x" + keccak(public_key.to_bytes())[-20:].hex()


def verify_message(message: str, signature: str, expected_address: Optional[str] = None) -> VerificationResult:
    """
    Verify a personal_sign signature and recover its signer.

    Args:
        message: The text that was signed (surrounding whitespace is ignored)
        signature: 65 byte hex signature, ``0x`` optional
        expected_address: Optional claimed signer; a different recovered
            address turns the verdict negative

    Returns:
        VerificationResult; malformed or non-matching input yields
        ``is_valid=False`` rather than an exception
    """
    message = message.strip() if isinstance(message, str) else ""
    if not message:
        return VerificationResult.invalid(message, EMPTY_MESSAGE)

    check = parse_signature(signature)
    if not check.ok:
        logger.debug(f"Rejected signature before recovery: {check.error}")
        return VerificationResult.invalid(message, check.error)

    signer = recover_address(personal_message_hash(message), check.signature)
    if signer is None:
        return VerificationResult.invalid(message, RECOVERY_FAILED)

    if expected_address is not None and signer != to_lower_address(expected_address):
        logger.debug(f"Recovered {signer} but caller claimed {expected_address}")
        return VerificationResult.invalid(message, SIGNER_MISMATCH)

    return VerificationResult.valid(signer, message)


def verify(message: str, signature: str) -> VerificationResult:
    """Recover-only verification: valid whenever a signer can be recovered."""
    return verify_message(message, signature)


def is_valid_address(address: Any) -> bool:
    """
    Structural check of a 20 byte hex address.

    All-lowercase and all-uppercase forms are accepted as is; mixed case must
    carry a correct EIP-55 checksum.
    """
    if not isinstance(address, str) or not is_hex_address(address):
        return False
    if is_checksum_formatted_address(address):
        return is_checksum_address(address)
    return True


def to_lower_address(address: str) -> str:
    """Normalise an address to the ``0x`` + lowercase hex form used in results."""
    return add_hex_prefix(address.strip().lower())
