from dataclasses import dataclass, field

from resolvent import schema as S


@S.entity
@dataclass(slots=True)
class User:
    name: str
    email: str
    id: S.ID = field(default_factory=S.hex_id)

    # Just to show a computed field
    @S.computed(name="flatInfos")
    def flat_infos(self) -> str:
        return ":".join((self.name, self.email, self.id))
