import json

import pytest

from tvl_rollup.core.custom_types import ParentProtocol
from tvl_rollup.core.errors import NoChildrenError
from tvl_rollup.directory import ProtocolDirectory, sluggify


@pytest.fixture
def directory(tmp_path, directory_payload):
    p = tmp_path / 'protocols.json'
    p.write_text(json.dumps(directory_payload))
    return ProtocolDirectory.from_json_path(p)


def test_sluggify():
    assert sluggify('Aave V3') == 'aave-v3'
    assert sluggify("Beefy's Vault") == 'beefys-vault'


def test_children_in_directory_order(directory):
    parent = directory.get_parent('parent#aave')
    assert [c['name'] for c in directory.resolve_children(parent)] == ['Aave V2', 'Aave V3']


def test_parent_lookup_by_name_and_slug(directory):
    assert directory.get_parent('Uniswap').id == 'parent#uniswap'
    assert directory.get_parent('ghost-finance').id == 'parent#ghost'
    assert directory.get_parent('parent#aave').metadata == {'url': 'https://aave.com'}
    with pytest.raises(NoChildrenError):
        directory.get_parent('nope')


def test_parent_without_children_is_not_found(directory):
    with pytest.raises(NoChildrenError):
        directory.resolve_children(directory.get_parent('parent#ghost'))


def test_child_named_like_parent_is_rejected():
    d = ProtocolDirectory(protocols=({'name': 'Curve', 'parentProtocol': 'parent#curve'},
                                     {'name': 'Curve V2', 'parentProtocol': 'parent#curve'}))
    with pytest.raises(NoChildrenError):
        d.resolve_children(ParentProtocol(id='parent#curve', name='Curve'))


def test_plain_list_file(tmp_path):
    p = tmp_path / 'list.json'
    p.write_text(json.dumps([{'name': 'X', 'parentProtocol': 'parent#x'}]))
    d = ProtocolDirectory.from_json_path(p)
    assert d.children_of(ParentProtocol(id='parent#x', name='X Parent')) == [{'name': 'X', 'parentProtocol': 'parent#x'}]
    assert d.parents == ()
