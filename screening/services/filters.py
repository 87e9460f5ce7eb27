"""
Translate the client's ``filter`` / ``where`` query objects to querysets.

The patient app sends LoopBack-style JSON::

    ?filter={"where": {"patientId": 3, "created": {"gte": "2020-05-01"}},
             "order": ["created DESC"], "limit": 10, "skip": 0,
             "include": [{"relation": "healthCenter"}]}

Only fields named in the caller's ``field_map`` (wire name -> model field)
are accepted; anything else is a 400.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q, QuerySet
from rest_framework.exceptions import ValidationError

OPERATORS = {
    'gt': 'gt',
    'gte': 'gte',
    'lt': 'lt',
    'lte': 'lte',
    'inq': 'in',
    'between': 'range',
    'like': 'contains',
}

INCLUDABLE = {'healthCenter': 'health_center'}


def parse_query_object(raw: Optional[str], name: str) -> Dict[str, Any]:
    """Decode a JSON query parameter; missing or empty means ``{}``."""
    if raw is None or raw == '':
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: 'must be a JSON object'})
    if not isinstance(value, dict):
        raise ValidationError({name: 'must be a JSON object'})
    return value


def _field(field_map: Dict[str, str], name: str) -> str:
    try:
        return field_map[name]
    except KeyError:
        raise ValidationError({'where': f'unknown field {name!r}'})


def _condition(field: str, value: Any) -> Q:
    if not isinstance(value, dict):
        return Q(**{field: value}) if value is not None else Q(**{f'{field}__isnull': True})

    q = Q()
    for op, operand in value.items():
        if op == 'eq':
            q &= _condition(field, operand)
        elif op == 'neq':
            q &= ~_condition(field, operand)
        elif op == 'nin':
            if not isinstance(operand, list):
                raise ValidationError({'where': f'{op} expects a list'})
            q &= ~Q(**{f'{field}__in': operand})
        elif op in OPERATORS:
            if op in ('inq', 'between') and not isinstance(operand, list):
                raise ValidationError({'where': f'{op} expects a list'})
            if op == 'between' and len(operand) != 2:
                raise ValidationError({'where': 'between expects two values'})
            if op == 'like':
                operand = str(operand).strip('%')
            q &= Q(**{f'{field}__{OPERATORS[op]}': operand})
        else:
            raise ValidationError({'where': f'unsupported operator {op!r}'})
    return q


def where_to_q(where: Dict[str, Any], field_map: Dict[str, str]) -> Q:
    q = Q()
    for key, value in where.items():
        if key in ('and', 'or'):
            if not isinstance(value, list) or not all(isinstance(c, dict) for c in value):
                raise ValidationError({'where': f'{key} expects a list of objects'})
            parts = [where_to_q(c, field_map) for c in value]
            if not parts:
                continue
            combined = parts[0]
            for part in parts[1:]:
                combined = (combined & part) if key == 'and' else (combined | part)
            q &= combined
        else:
            q &= _condition(_field(field_map, key), value)
    return q


def apply_where(qs: QuerySet, where: Dict[str, Any], field_map: Dict[str, str]) -> QuerySet:
    if not where:
        return qs
    if not isinstance(where, dict):
        raise ValidationError({'where': 'must be a JSON object'})
    # lookups are prepared here, so badly typed values fail now rather than on evaluation
    try:
        return qs.filter(where_to_q(where, field_map))
    except DjangoValidationError as e:
        raise ValidationError({'where': e.messages})
    except (TypeError, ValueError) as e:
        raise ValidationError({'where': str(e)})


def _ordering(order: Any, field_map: Dict[str, str]) -> list[str]:
    items: Iterable[Any] = [order] if isinstance(order, str) else order
    if not isinstance(items, list) and not isinstance(items, tuple):
        raise ValidationError({'order': 'must be a string or a list of strings'})
    result = []
    for item in items:
        parts = str(item).split()
        if not parts or len(parts) > 2:
            raise ValidationError({'order': f'invalid order clause {item!r}'})
        direction = parts[1].upper() if len(parts) == 2 else 'ASC'
        if direction not in ('ASC', 'DESC'):
            raise ValidationError({'order': f'invalid direction in {item!r}'})
        try:
            field = field_map[parts[0]]
        except KeyError:
            raise ValidationError({'order': f'unknown field {parts[0]!r}'})
        result.append(f'-{field}' if direction == 'DESC' else field)
    return result


def _non_negative_int(value: Any, name: str) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: 'must be an integer'})
    if n < 0:
        raise ValidationError({name: 'must not be negative'})
    return n


def included_relations(flt: Dict[str, Any], relations: Optional[Dict[str, str]] = None) -> set[str]:
    """Return the wire names of the relations requested with ``include``.

    ``relations`` maps includable wire names to model relations and
    defaults to the appointment ones; pass ``{}`` for models without any.
    """
    relations = INCLUDABLE if relations is None else relations
    include = flt.get('include') or []
    if isinstance(include, (str, dict)):
        include = [include]
    names = set()
    for item in include:
        name = item.get('relation') if isinstance(item, dict) else item
        if not isinstance(name, str) or name not in relations:
            raise ValidationError({'include': f'unknown relation {name!r}'})
        names.add(name)
    return names


def apply_filter(qs: QuerySet, flt: Dict[str, Any], field_map: Dict[str, str],
                 relations: Optional[Dict[str, str]] = None) -> QuerySet:
    """Apply where/order/include/skip/limit in that order."""
    relations = INCLUDABLE if relations is None else relations
    qs = apply_where(qs, flt.get('where') or {}, field_map)
    order = flt.get('order')
    # id keeps pages stable when the requested keys tie
    qs = qs.order_by(*_ordering(order, field_map), 'id') if order else qs.order_by('id')
    for name in included_relations(flt, relations):
        qs = qs.select_related(relations[name])
    skip = flt.get('skip', flt.get('offset'))
    start = _non_negative_int(skip, 'skip') if skip is not None else 0
    limit = flt.get('limit')
    if limit is not None:
        return qs[start:start + _non_negative_int(limit, 'limit')]
    return qs[start:] if start else qs
