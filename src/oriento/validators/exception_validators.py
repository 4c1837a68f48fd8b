from sqlalchemy import inspect as sa_inspect


def find_unknown_model_kwargs(model, kwargs: dict) -> list[str]:
    """
    Return the kwarg keys that are not mapped attributes of `model`.
    - model: the SQLAlchemy model class (not instance)
    - kwargs: dict of incoming kwargs to validate
    """
    mapper = sa_inspect(model)
    # mapper.attrs covers columns and relationships (e.g. Conversation.user)
    allowed = {attr.key for attr in mapper.attrs}
    return [k for k in kwargs.keys() if k not in allowed]


def get_required_columns(model) -> list[str]:
    """
    Columns that are NOT NULL and have no server/client default and are not auto PKs.
    """
    cols = []
    for col in model.__table__.columns:
        has_default = col.default is not None or col.server_default is not None
        is_auto_pk = col.autoincrement is True and col.primary_key
        if not col.nullable and not has_default and not is_auto_pk:
            cols.append(col.name)
    return cols


def find_missing_required(model, kwargs: dict) -> list[str]:
    """
    Required columns absent (or None) in kwargs.

    A column counts as provided when its relationship is passed instead,
    e.g. `user=<User>` satisfies `user_id`.
    """
    provided_via_relationship: set[str] = set()
    for rel in sa_inspect(model).relationships:
        if kwargs.get(rel.key) is not None:
            provided_via_relationship.update(c.name for c in rel.local_columns)

    return [
        c for c in get_required_columns(model)
        if kwargs.get(c) is None and c not in provided_via_relationship
    ]
