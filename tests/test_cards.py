import pytest

from holdem.cards import RANKS, SUITS, Card, Deck, build_deck, cards_to_labels, parse_cards, parse_label


def test_card_labels_and_names():
    card = Card(14, "h")
    assert card.label == "Ah"
    assert str(card) == "Ah"
    assert card.name == "Ace of Hearts"
    assert Card(10, "d").label == "Td"
    assert Card(7, "c").name == "7 of Clubs"


def test_card_validation_rejects_invalid_values():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card(1, "h")
    with pytest.raises(ValueError, match="Invalid rank"):
        Card(15, "s")
    with pytest.raises(ValueError, match="Invalid suit"):
        Card(10, "x")


def test_parse_label_round_trips_every_card():
    for rank in RANKS:
        for suit in SUITS:
            assert parse_label(rank + suit).label == rank + suit


def test_parse_label_rejects_garbage():
    for label in ("", "A", "1h", "Ahh", "Zz"):
        with pytest.raises(ValueError):
            parse_label(label)


def test_cards_equal_by_rank_and_suit():
    assert Card(12, "s") == parse_label("Qs")
    assert len({Card(12, "s"), parse_label("Qs")}) == 1


def test_fresh_deck_has_52_unique_cards():
    deck = Deck()
    assert len(deck) == 52
    assert len(set(deck.cards())) == 52


def test_seeded_shuffles_are_reproducible():
    assert build_deck(7).cards() == build_deck(7).cards()
    assert build_deck(7).cards() != build_deck(8).cards()


def test_deal_removes_from_top():
    deck = build_deck(3)
    top = deck.peek()
    assert deck.deal() == top
    assert deck.remaining == 51
    assert top not in deck.cards()


def test_deal_from_empty_deck_raises():
    deck = Deck.stacked(parse_cards(["Ah", "Kd"]))
    assert cards_to_labels(deck.deal_many(2)) == ["Ah", "Kd"]
    with pytest.raises(RuntimeError, match="empty deck"):
        deck.deal()
    with pytest.raises(RuntimeError, match="empty"):
        deck.peek()


def test_deal_many_rejects_overdraw():
    deck = Deck.stacked(parse_cards(["Ah", "Kd", "2c"]))
    with pytest.raises(RuntimeError):
        deck.deal_many(4)
    assert deck.remaining == 3


def test_stacked_deck_rejects_duplicates():
    with pytest.raises(ValueError, match="Duplicate"):
        Deck.stacked(parse_cards(["Ah", "Ah"]))


def test_index_helpers_count_from_top():
    deck = Deck.stacked(parse_cards(["Ah", "Kd", "2c", "9s"]))
    assert deck.is_valid_index(3)
    assert not deck.is_valid_index(4)
    assert deck.peek(2).label == "2c"
    assert cards_to_labels(deck.peek_many(2)) == ["Ah", "Kd"]
    assert deck.deal_at(1).label == "Kd"
    assert cards_to_labels(deck.cards()) == ["Ah", "2c", "9s"]
    with pytest.raises(IndexError):
        deck.peek(3)


def test_replace_at_swaps_card_in_place():
    deck = Deck.stacked(parse_cards(["Ah", "Kd"]))
    replaced = deck.replace_at(1, parse_label("7h"))
    assert replaced.label == "Kd"
    assert cards_to_labels(deck.cards()) == ["Ah", "7h"]
    with pytest.raises(ValueError, match="already in the deck"):
        deck.replace_at(0, parse_label("7h"))


def test_reset_and_shuffle_restores_full_deck():
    deck = build_deck(11)
    deck.deal_many(10)
    deck.reset_and_shuffle()
    assert len(set(deck.cards())) == 52
