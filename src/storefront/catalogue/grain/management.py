"""Grain management — commands and handlers."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.grain.grain import Grain
from storefront.domain import storefront
from storefront.shared.errors import ConflictError


@storefront.command(part_of="Grain")
class CreateGrain:
    name: String(required=True, max_length=100)
    description: Text()
    price: Integer(required=True, min_value=0)
    unit: String(max_length=20)
    is_active: Boolean(default=True)


@storefront.command(part_of="Grain")
class UpdateGrain:
    grain_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()
    price: Integer(min_value=0)
    unit: String(max_length=20)
    is_active: Boolean()


@storefront.command(part_of="Grain")
class DeleteGrain:
    grain_id: Identifier(required=True)


def _assert_name_free(repo, name, grain_id=None):
    clashes = [g for g in repo._dao.query.filter(name=name).all().items if str(g.id) != str(grain_id)]
    if clashes:
        raise ConflictError({"name": [f"A grain named {name} already exists"]}, code="DUPLICATE_GRAIN")


@storefront.command_handler(part_of=Grain)
class ManageGrainHandler:
    @handle(CreateGrain)
    def create_grain(self, command):
        repo = current_domain.repository_for(Grain)
        _assert_name_free(repo, command.name)

        grain = Grain(
            name=command.name,
            description=command.description,
            price=command.price,
            unit=command.unit or "kg",
            is_active=command.is_active,
        )
        repo.add(grain)
        return str(grain.id)

    @handle(UpdateGrain)
    def update_grain(self, command):
        repo = current_domain.repository_for(Grain)
        grain = repo.get(command.grain_id)
        if command.name and command.name != grain.name:
            _assert_name_free(repo, command.name, grain.id)

        grain.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            unit=command.unit,
            is_active=command.is_active,
        )
        repo.add(grain)
        return str(grain.id)

    @handle(DeleteGrain)
    def delete_grain(self, command):
        repo = current_domain.repository_for(Grain)
        repo._dao.delete(repo.get(command.grain_id))
