"""EmailAddress value object for validated, normalised email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from pizzeria.domain import pizzeria

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@pizzeria.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one ``@``, non-empty local and domain parts, a dotted domain, no
    whitespace, no consecutive dots and none of the characters that would
    need quoting. Addresses are compared case-insensitively, so callers should
    build instances through ``EmailAddress.normalised``.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def address_must_be_well_formed(self):
        email = self.address

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        local_part, domain_part = email.split("@", 1)

        for part in (local_part, domain_part):
            if not part or part.startswith(".") or part.endswith(".") or ".." in part:
                raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if "." not in domain_part:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        for label in domain_part.split("."):
            if label.startswith("-") or label.endswith("-"):
                raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if any(ch in email for ch in _FORBIDDEN):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

    @classmethod
    def normalised(cls, address: str) -> "EmailAddress":
        return cls(address=address.strip().lower())
