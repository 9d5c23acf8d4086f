from feed_publisher.errors import ValidationError
from feed_publisher.models import utcnow


def build_changes(model, allowed, values):
    """
    Turn the supplied subset of `values` into (field, value) pairs for an
    UPDATE on `model`. Only keys present in `values` and named in `allowed`
    are used; an explicit None is kept. `updated_at` is always refreshed.

    Raises ValidationError when nothing besides the timestamp would change.
    """
    changes = [(getattr(model, name), values[name]) for name in allowed if name in values]
    if not changes:
        raise ValidationError("No fields to update")
    changes.append((model.updated_at, utcnow()))
    return changes
