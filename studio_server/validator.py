"""Turn raw model output into a legal bid token or a card from the hand."""
from typing import Optional, Sequence

from .heuristics import choose_card
from .models import Card, Outcome, Suit, PASS, SPECIAL_BIDS, contract_bids

QUOTE_CHARS = "\"'`“”‘’«»"


def clean_response(text: str) -> str:
    """Drop quote characters anywhere in the text and trim whitespace."""
    if not text:
        return ""
    return text.translate({ord(q): None for q in QUOTE_CHARS}).strip()


def validate_bid(text: str) -> Outcome:
    """Find the bid the model answered with.

    A bare Passe/Contre/Surcontre is taken as is. Otherwise the first
    contract bid (1♣, 1♦, ... 7SA) whose token appears in the text wins,
    so "je pense 2♦ ou 3♣" reads as 2♦.
    """
    cleaned = clean_response(text)
    if cleaned in SPECIAL_BIDS:
        return Outcome.ok(cleaned)
    for bid in contract_bids():
        if bid.token in cleaned:
            return Outcome.ok(bid.token)
    return Outcome.invalid(f"no bid in response {text!r}")


def parse_bid(text: str) -> str:
    """Like validate_bid, but an unreadable answer counts as a pass."""
    outcome = validate_bid(text)
    return outcome.value if outcome.is_ok else PASS


def validate_card(text: str, hand: Sequence[Card], lead_suit: Optional[Suit] = None) -> Outcome:
    """Find the first card of the hand whose rank and suit both appear in the text.

    When the hand holds the lead suit only cards of that suit are eligible:
    the first match over the whole hand could name a card of another suit,
    and playing it would be a revoke.
    """
    text = text or ""
    eligible = hand
    if lead_suit is not None and any(c.suit == lead_suit for c in hand):
        eligible = [c for c in hand if c.suit == lead_suit]
    for card in eligible:
        if card.rank_name in text and card.suit_symbol in text:
            return Outcome.ok(card)
    return Outcome.invalid(f"no playable card in response {text!r}")


def parse_card(text: str, hand: Sequence[Card], lead_suit: Optional[Suit] = None) -> Card:
    """Like validate_card, falling back to the local play rule."""
    outcome = validate_card(text, hand, lead_suit)
    return outcome.value if outcome.is_ok else choose_card(hand, lead_suit)
