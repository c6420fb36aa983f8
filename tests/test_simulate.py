"""Tests for the four-seat deal simulation."""
import random

from studio_server.engine import DecisionEngine
from studio_server.models import Bid, Card, Suit, NO_TRUMP, PASS_BID
from studio_server.simulate import (
    auction_finished, contract_trump, deal_hands, final_contract, is_legal_call,
    main, next_position, play_hand, run_auction, seat_order, trick_winner,
)


def calls(*pairs):
    return [(pos, Bid.from_token(token)) for pos, token in pairs]


class TestSeating:

    def test_next_position_wraps(self):
        assert next_position('N') == 'E'
        assert next_position('W') == 'N'

    def test_seat_order(self):
        assert seat_order('S') == ['S', 'W', 'N', 'E']

    def test_deal(self):
        hands = deal_hands(random.Random(3))
        assert sorted(hands) == ['E', 'N', 'S', 'W']
        cards = [card for h in hands.values() for card in h]
        assert len(cards) == 52
        assert len(set(cards)) == 52
        assert all(len(h) == 13 for h in hands.values())


class TestAuction:

    def test_four_passes_end_the_auction(self):
        bids = calls(('N', 'Passe'), ('E', 'Passe'), ('S', 'Passe'))
        assert not auction_finished(bids)
        assert auction_finished(bids + calls(('W', 'Passe')))

    def test_three_passes_after_a_bid(self):
        bids = calls(('N', '1♠'), ('E', 'Passe'), ('S', 'Passe'), ('W', 'Passe'))
        assert auction_finished(bids)
        assert not auction_finished(bids[:3])

    def test_contract_bid_must_be_higher(self):
        bids = calls(('N', '1♥'))
        assert is_legal_call(Bid.from_token('1♠'), bids, 'E')
        assert not is_legal_call(Bid.from_token('1♦'), bids, 'E')
        assert is_legal_call(PASS_BID, bids, 'E')

    def test_double_only_against_opponents(self):
        bids = calls(('N', '1♥'))
        assert is_legal_call(Bid.from_token('Contre'), bids, 'E')
        assert not is_legal_call(Bid.from_token('Contre'), bids, 'S')
        assert not is_legal_call(Bid.from_token('Contre'), [], 'N')

    def test_redouble_answers_a_double(self):
        bids = calls(('N', '1♥'), ('E', 'Contre'))
        assert is_legal_call(Bid.from_token('Surcontre'), bids, 'S')
        assert not is_legal_call(Bid.from_token('Surcontre'), calls(('N', '1♥')), 'E')

    def test_final_contract(self):
        bids = calls(('N', '1♥'), ('E', 'Passe'), ('S', '3♥'), ('W', 'Contre'),
                     ('N', 'Passe'), ('E', 'Passe'), ('S', 'Passe'))
        assert final_contract(bids) == ('3♥X', 'N')

    def test_passed_out(self):
        assert final_contract(calls(('N', 'Passe'), ('E', 'Passe'), ('S', 'Passe'), ('W', 'Passe'))) is None

    def test_illegal_call_recorded_as_pass(self, fake_client):
        engine = DecisionEngine(client=fake_client('1♣'))
        hands = deal_hands(random.Random(1))
        bids = run_auction(engine, hands, dealer='N')
        assert [b.token for _, b in bids] == ['1♣', 'Passe', 'Passe', 'Passe']


class TestPlay:

    def test_contract_trump(self):
        assert contract_trump('4♥X') == Suit.HEARTS
        assert contract_trump('3SA') == NO_TRUMP

    def test_trick_winner_follows_lead(self):
        trick = {pos: Card.from_label(label) for pos, label in
                 [('N', '10♥'), ('E', 'A♣'), ('S', 'K♥'), ('W', '2♥')]}
        assert trick_winner(trick, 'N', NO_TRUMP) == 'S'

    def test_trick_winner_trump(self):
        trick = {pos: Card.from_label(label) for pos, label in
                 [('N', 'A♥'), ('E', '2♠'), ('S', 'K♥'), ('W', '3♠')]}
        assert trick_winner(trick, 'N', Suit.SPADES) == 'W'

    def test_full_deal_with_local_rules(self):
        rng = random.Random(11)
        engine = DecisionEngine()
        hands = deal_hands(rng)
        bids = run_auction(engine, hands, dealer='E')
        assert auction_finished(bids)

        result = final_contract(bids) or ('1SA', 'N')
        contract, declarer = result
        played = play_hand(engine, hands, declarer, contract)

        assert len(played) == 13
        assert all(len(h) == 0 for h in hands.values())
        assert played[0][0] == next_position(declarer)
        for (_, _, winner), (next_leader, _, _) in zip(played, played[1:]):
            assert winner == next_leader

    def test_main_prints_the_deal(self, monkeypatch, capsys):
        monkeypatch.delenv('OPENAI_API_KEY', raising=False)
        monkeypatch.delenv('VITE_OPENAI_API_KEY', raising=False)
        main(['--seed', '5', '--tricks', '2'])
        out = capsys.readouterr().out
        assert 'local rules' in out
        assert 'Auction:' in out
