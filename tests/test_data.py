import pytest

from spatial_led import Data, DataKeyError, DataTypeError, Rgb, SledError


def test_set_then_get():
    data = Data()
    data.set('speed', 1.5)
    data.set('tint', Rgb(1, 0, 0))

    assert data.get('speed') == 1.5
    assert data.get('tint', Rgb) == Rgb(1.0, 0.0, 0.0)
    assert list(data.keys()) == ['speed', 'tint']
    assert 'speed' in data
    assert len(data) == 2


def test_missing_key_message():
    with pytest.raises(DataKeyError) as excinfo:
        Data().get('frame')

    assert str(excinfo.value) == 'No data associated with the key `frame`.'
    assert isinstance(excinfo.value, KeyError)
    assert isinstance(excinfo.value, SledError)


def test_wrong_type_message():
    data = Data()
    data.set('frame', 'three')

    with pytest.raises(DataTypeError, match='exists, but it is not of type int'):
        data.get('frame', int)


def test_store_empty_at_and_remove():
    data = Data()

    assert data.empty_at('count')
    assert data.store('count', 3) == 3
    assert not data.empty_at('count')
    assert data.remove('count') == 3
    with pytest.raises(DataKeyError):
        data.remove('count')


@pytest.mark.parametrize('key', ['', None, 3])
def test_invalid_keys_are_rejected(key):
    with pytest.raises(DataKeyError):
        Data().set(key, 1)
