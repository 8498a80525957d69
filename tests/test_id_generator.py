import random

from pastebin.core.id_generator import ID_ALPHABET, IdGenerator


def test_alphabet_is_62_alphanumerics():
    assert len(ID_ALPHABET) == 62
    assert len(set(ID_ALPHABET)) == 62
    assert ID_ALPHABET.isalnum()


def test_ids_have_fixed_length_and_alphabet():
    generator = IdGenerator(4)
    for _ in range(200):
        new_id = generator.new_id()
        assert len(new_id) == 4
        assert set(new_id) <= set(ID_ALPHABET)


def test_length_is_configurable():
    assert len(IdGenerator(9).new_id()) == 9


def test_same_seed_same_sequence():
    a = IdGenerator(4, random.Random(42))
    b = IdGenerator(4, random.Random(42))
    assert [a.new_id() for _ in range(10)] == [b.new_id() for _ in range(10)]
