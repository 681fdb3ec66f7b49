"""Тесты результатов одиночных вызовов и правил успешности."""

from __future__ import annotations

import pytest

from bitrix24_sdk.exceptions import FieldTypeError, ParseError
from bitrix24_sdk.item import Item
from bitrix24_sdk.result import (
    AbstractResult,
    AddedItemResult,
    DeletedItemResult,
    Result,
    UpdatedItemResult,
    extract_id,
    first_element_truthy,
    non_empty_list,
    truthy_mapping_key,
    truthy_scalar,
)


def test_abstract_result_requires_success_rule(make_response) -> None:
    """Конкретный результат обязан определить is_success."""

    class Incomplete(AbstractResult):
        pass

    with pytest.raises(TypeError):
        Incomplete(make_response({"result": True}))  # type: ignore[abstract]


def test_result_exposes_core_response(make_response) -> None:
    """Результат отдаёт ответ ядра и его ResponseData только для чтения."""

    response = make_response({"result": [1], "next": 50, "total": 51}, api_method="crm.deal.list")
    result = Result(response, success=non_empty_list)

    assert result.core_response is response
    assert result.response_data is response.response_data
    assert result.pagination.next == 50
    assert result.total == 51
    assert "crm.deal.list" in repr(result)


def test_truthy_scalar_success(make_response) -> None:
    """{"result": true} считается успехом по правилу истинного скаляра."""

    assert Result(make_response({"result": True}), success=truthy_scalar).is_success()
    assert not Result(make_response({"result": False}), success=truthy_scalar).is_success()


def test_first_element_rule() -> None:
    """Правило первого элемента смотрит только на result[0]."""

    assert first_element_truthy([True])
    assert not first_element_truthy([False, True])
    assert not first_element_truthy([])
    assert first_element_truthy({"0": True})


def test_first_element_rule_wraps_scalar() -> None:
    """Скалярный result читается как список из одного элемента."""

    assert first_element_truthy(True)
    assert not first_element_truthy(False)
    assert not first_element_truthy(None)


def test_non_empty_list_and_mapping_key_rules() -> None:
    """Правила различаются так же, как различаются методы портала."""

    assert non_empty_list([{"ID": 1}])
    assert not non_empty_list([])
    assert not non_empty_list({"ID": 1})

    rule = truthy_mapping_key("numerator")
    assert rule({"numerator": {"id": 1}})
    assert not rule({"numerator": None})
    assert not rule([1])


def test_same_payload_differs_by_rule(make_response) -> None:
    """Один и тот же ответ может быть успехом для одного метода и нет для другого."""

    response = make_response({"result": [False]})

    assert Result(response, success=truthy_scalar).is_success()
    assert not Result(response, success=first_element_truthy).is_success()


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"result": 42}, 42),
        ({"result": "42"}, 42),
        ({"result": [{"ID": 42}]}, 42),
        ({"result": [42]}, 42),
        ({"result": {"id": 42}}, 42),
    ],
)
def test_added_item_result_extracts_id(make_response, payload, expected) -> None:
    """Идентификатор созданной записи извлекается из разных форм ответа."""

    result = AddedItemResult(make_response(payload))

    assert result.id == expected
    assert result.is_success()


def test_added_item_result_with_nested_key(make_response) -> None:
    """Для вложенных ответов ID берётся по пути ключей."""

    result = AddedItemResult(make_response({"result": {"numerator": {"id": "7", "name": "N"}}}), id_key=("numerator", "id"))

    assert result.id == 7


@pytest.mark.parametrize("result_value", [None, [], {"NAME": "x"}, "abc", True])
def test_added_item_result_without_id_fails(make_response, result_value) -> None:
    """Без корректного ID результат не считается успешным, а id бросает ошибку."""

    result = AddedItemResult(make_response({"result": result_value}))

    assert not result.is_success()
    with pytest.raises((ParseError, FieldTypeError)):
        result.id


def test_updated_and_deleted_results(make_response) -> None:
    """Обновление и удаление успешны, когда result истинен."""

    assert UpdatedItemResult(make_response({"result": True})).is_success()
    assert not UpdatedItemResult(make_response({"result": False})).is_success()
    assert DeletedItemResult(make_response({"result": True})).is_success()
    assert not DeletedItemResult(make_response({"result": None})).is_success()


def test_items_and_item_wrap_records(make_response) -> None:
    """Списки и объекты из result оборачиваются в записи."""

    listing = Result(make_response({"result": {"numerators": [{"id": 1}, {"id": 2}]}}))
    single = Result(make_response({"result": {"numerator": {"id": 3}}}))

    assert [item.id for item in listing.items(key="numerators")] == [1, 2]
    assert single.item(key="numerator") == Item({"id": 3})


def test_items_reject_wrong_shape(make_response) -> None:
    """Ожидаемый список или объект отсутствует: ошибка разбора."""

    result = Result(make_response({"result": True}))

    with pytest.raises(ParseError):
        result.items()
    with pytest.raises(ParseError):
        result.item()
    with pytest.raises(ParseError):
        result.items(key="missing")


def test_extract_id_rejects_empty_list() -> None:
    with pytest.raises(ParseError):
        extract_id([])
