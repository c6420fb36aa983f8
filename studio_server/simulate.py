"""Deal simulation: four seats driven by the decision engine.

Deals a shuffled deck, runs the auction seat by seat and plays tricks with
decide_play. The engine only answers for one seat at a time; this module
owns the bid history, turn order and hands, as a table would.

Usage:
    python3 -m studio_server.simulate --seed 7 --tricks 13
"""
import argparse
import random
from typing import Optional

from .engine import DecisionEngine
from .heuristics import high_card_points
from .models import (
    BiddingContext, Bid, Card, PlayContext, Suit, Vulnerability,
    DOUBLE, NO_TRUMP, PASS_BID, POSITIONS, REDOUBLE, SYMBOL_TO_SUIT,
    hand_label, new_deck, sort_hand,
)

MAX_CALLS = 64
PARTNERSHIPS = {"N": "NS", "S": "NS", "E": "EW", "W": "EW"}


def next_position(position: str) -> str:
    return POSITIONS[(POSITIONS.index(position) + 1) % 4]


def seat_order(first: str) -> list[str]:
    """The four seats clockwise, starting from first."""
    i = POSITIONS.index(first)
    return [POSITIONS[(i + k) % 4] for k in range(4)]


def deal_hands(rng: random.Random) -> dict[str, list[Card]]:
    """Shuffle and deal 13 cards to each seat, sorted high to low."""
    deck = new_deck()
    rng.shuffle(deck)
    return {pos: sort_hand(deck[i::4]) for i, pos in enumerate(POSITIONS)}


# ---------------------------------------------------------------------------
# Auction
# ---------------------------------------------------------------------------

def _last_call(bids) -> Optional[tuple[str, Bid]]:
    """Last call that was not a pass."""
    for pos, bid in reversed(bids):
        if not bid.is_pass:
            return pos, bid
    return None


def _highest_contract(bids) -> Optional[Bid]:
    for _, bid in reversed(bids):
        if bid.is_contract:
            return bid
    return None


def is_legal_call(bid: Bid, bids, position: str) -> bool:
    """Pass is always legal; a contract bid must be higher than the last one;
    Contre answers an opponent's bid, Surcontre an opponent's Contre."""
    if bid.is_pass:
        return True
    if bid.is_contract:
        highest = _highest_contract(bids)
        return highest is None or bid.beats(highest)
    last = _last_call(bids)
    if last is None or PARTNERSHIPS[last[0]] == PARTNERSHIPS[position]:
        return False
    if bid.special == DOUBLE:
        return last[1].is_contract
    return last[1].special == DOUBLE


def auction_finished(bids) -> bool:
    """Four passes to start, or three passes after any other call."""
    if len(bids) < 4:
        return False
    if not any(bid.is_contract for _, bid in bids):
        return all(bid.is_pass for _, bid in bids[:4])
    return all(bid.is_pass for _, bid in bids[-3:])


def run_auction(engine: DecisionEngine, hands: dict, dealer: str = "N",
                vulnerability: Vulnerability = None) -> list[tuple[str, Bid]]:
    """Ask each seat for a call until the auction ends.

    A call that is not legal at that point of the auction is recorded as a
    pass.
    """
    vulnerability = vulnerability or Vulnerability()
    bids = []
    position = dealer
    while not auction_finished(bids) and len(bids) < MAX_CALLS:
        last = _last_call(bids)
        context = BiddingContext(
            hand=tuple(hands[position]),
            position=position,
            dealer=dealer,
            bids=tuple(bids),
            vulnerability=vulnerability,
            last_bid=last[1] if last else None,
        )
        bid = Bid.from_token(engine.decide_bid(context))
        if not is_legal_call(bid, bids, position):
            bid = PASS_BID
        bids.append((position, bid))
        position = next_position(position)
    return bids


def final_contract(bids) -> Optional[tuple[str, str]]:
    """(contract, declarer) for a finished auction, None if passed out.

    The declarer is the first player of the winning side to have named the
    final strain. A doubled contract is suffixed X, a redoubled one XX.
    """
    highest = None
    for i, (pos, bid) in enumerate(bids):
        if bid.is_contract:
            highest = (i, pos, bid)
    if highest is None:
        return None

    index, pos, bid = highest
    side = PARTNERSHIPS[pos]
    declarer = next(p for p, b in bids
                    if b.is_contract and b.strain == bid.strain and PARTNERSHIPS[p] == side)

    suffix = ""
    for _, later in bids[index + 1:]:
        if later.special == DOUBLE:
            suffix = "X"
        elif later.special == REDOUBLE:
            suffix = "XX"
    return bid.token + suffix, declarer


def contract_trump(contract: str):
    """Trump suit of a contract string such as '4♥X' or '3SA'."""
    strain = contract[1:].rstrip("X")
    if strain == NO_TRUMP:
        return NO_TRUMP
    return SYMBOL_TO_SUIT[strain]


# ---------------------------------------------------------------------------
# Card play
# ---------------------------------------------------------------------------

def play_trick(engine: DecisionEngine, hands: dict, leader: str, contract: str,
               trump) -> dict[str, Card]:
    """Play one trick from leader clockwise; played cards leave the hands."""
    trick = {}
    lead_suit = None
    for pos in seat_order(leader):
        context = PlayContext(
            hand=tuple(hands[pos]),
            position=pos,
            trick=dict(trick),
            contract=contract,
            trump_suit=trump,
            lead_suit=lead_suit,
        )
        card = engine.decide_play(context)
        hands[pos].remove(card)
        trick[pos] = card
        if lead_suit is None:
            lead_suit = card.suit
    return trick


def trick_winner(trick: dict[str, Card], leader: str, trump) -> str:
    """Highest trump wins, otherwise the highest card of the lead suit."""
    lead_suit = trick[leader].suit
    winning_suit = lead_suit
    if isinstance(trump, Suit) and any(c.suit == trump for c in trick.values()):
        winning_suit = trump
    candidates = [(card.rank, pos) for pos, card in trick.items() if card.suit == winning_suit]
    return max(candidates)[1]


def play_hand(engine: DecisionEngine, hands: dict, declarer: str, contract: str,
              tricks: int = 13) -> list[tuple[str, dict, str]]:
    """Play up to `tricks` tricks; the opening lead is on declarer's left."""
    trump = contract_trump(contract)
    leader = next_position(declarer)
    played = []
    for _ in range(min(tricks, len(hands[leader]))):
        trick = play_trick(engine, hands, leader, contract, trump)
        winner = trick_winner(trick, leader, trump)
        played.append((leader, trick, winner))
        leader = winner
    return played


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main(argv=None):
    parser = argparse.ArgumentParser(description="Simulate one bridge deal with the decision engine.")
    parser.add_argument("--seed", type=int, default=None, help="shuffle seed")
    parser.add_argument("--dealer", choices=POSITIONS, default="N")
    parser.add_argument("--tricks", type=int, default=13, help="number of tricks to play")
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    engine = DecisionEngine.from_config()
    hands = deal_hands(rng)

    print(f"Remote model: {'yes' if engine.is_remote_configured else 'no (local rules)'}")
    for pos in POSITIONS:
        print(f"  {pos} ({high_card_points(hands[pos]):2d} pts): {hand_label(hands[pos])}")

    bids = run_auction(engine, hands, dealer=args.dealer)
    print("\nAuction: " + ", ".join(f"{pos}:{bid.token}" for pos, bid in bids))

    result = final_contract(bids)
    if result is None:
        print("Passed out.")
        return
    contract, declarer = result
    print(f"Contract: {contract} by {declarer}\n")

    tricks_by_side = {"NS": 0, "EW": 0}
    for n, (leader, trick, winner) in enumerate(
            play_hand(engine, hands, declarer, contract, args.tricks), 1):
        cards = ", ".join(f"{pos}:{trick[pos].label}" for pos in seat_order(leader))
        tricks_by_side[PARTNERSHIPS[winner]] += 1
        print(f"  Trick {n:2d}: {cards} -> {winner}")
    print(f"\nTricks: NS {tricks_by_side['NS']}, EW {tricks_by_side['EW']}")


if __name__ == "__main__":
    main()
