"""Local bidding and card-play rules used when no remote answer is available."""
from typing import Optional, Sequence

from .models import (
    BiddingContext, Card, Rank, Suit,
    NO_TRUMP, PASS, SUIT_SCAN_ORDER, SUIT_SYMBOLS,
)

HONOUR_POINTS = {
    Rank.ACE: 4,
    Rank.KING: 3,
    Rank.QUEEN: 2,
    Rank.JACK: 1,
}

MIN_BIDDING_POINTS = 6
OPENING_POINTS = 12
NO_TRUMP_RANGE = (12, 14)
NO_TRUMP_MAX_LENGTH = 4
LONG_SUIT_LENGTH = 5


def high_card_points(hand: Sequence[Card]) -> int:
    """Standard 4-3-2-1 count."""
    return sum(HONOUR_POINTS.get(c.rank, 0) for c in hand)


def suit_lengths(hand: Sequence[Card]) -> dict[Suit, int]:
    """Card count per suit, keyed in ♠ ♥ ♦ ♣ order."""
    counts = {suit: 0 for suit in SUIT_SCAN_ORDER}
    for card in hand:
        counts[card.suit] += 1
    return counts


def longest_suit(hand: Sequence[Card]) -> tuple[Suit, int]:
    """Longest suit and its length; ties go to the earlier suit in ♠ ♥ ♦ ♣."""
    best_suit, best_len = SUIT_SCAN_ORDER[0], -1
    for suit, length in suit_lengths(hand).items():
        if length > best_len:
            best_suit, best_len = suit, length
    return best_suit, best_len


def choose_bid(context: BiddingContext) -> str:
    """Pick a bid from high-card points and suit length alone.

    Under 6 points the answer is always Passe. An opening hand of 12-14
    points without a 5-card suit opens 1SA; otherwise 12+ points, or 6+
    points with a 5-card suit, open one of the longest suit.

    Once someone has opened, the rule passes whatever the hand holds.
    Responses are not modelled yet.
    """
    points = high_card_points(context.hand)
    suit, length = longest_suit(context.hand)

    if points < MIN_BIDDING_POINTS:
        return PASS

    if not context.has_prior_bid:
        low, high = NO_TRUMP_RANGE
        if low <= points <= high and length <= NO_TRUMP_MAX_LENGTH:
            return f"1{NO_TRUMP}"
        if points >= OPENING_POINTS:
            return f"1{SUIT_SYMBOLS[suit]}"
        if length >= LONG_SUIT_LENGTH:
            return f"1{SUIT_SYMBOLS[suit]}"
        return PASS

    return PASS


def choose_card(hand: Sequence[Card], lead_suit: Optional[Suit] = None) -> Card:
    """Play the last card of the lead suit if we hold one, else the last card.

    Purely positional: on a hand sorted high to low this discards the
    lowest card, on any other ordering it does not.
    """
    if not hand:
        raise ValueError("Cannot choose a card from an empty hand")
    if lead_suit is not None:
        following = [c for c in hand if c.suit == lead_suit]
        if following:
            return following[-1]
    return hand[-1]
