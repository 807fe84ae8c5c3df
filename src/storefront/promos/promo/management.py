"""Promo management — commands and handlers."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.promos.promo.promo import Promo


@storefront.command(part_of="Promo")
class CreatePromo:
    image_url: String(required=True, max_length=500)
    title: String(max_length=200)
    description: Text()
    link_url: String(max_length=500)
    is_active: Boolean(default=True)
    display_order: Integer(default=0, min_value=0)


@storefront.command(part_of="Promo")
class UpdatePromo:
    promo_id: Identifier(required=True)
    image_url: String(max_length=500)
    title: String(max_length=200)
    description: Text()
    link_url: String(max_length=500)
    is_active: Boolean()
    display_order: Integer(min_value=0)


@storefront.command(part_of="Promo")
class DeletePromo:
    promo_id: Identifier(required=True)


@storefront.command_handler(part_of=Promo)
class ManagePromoHandler:
    @handle(CreatePromo)
    def create_promo(self, command):
        promo = Promo(
            image_url=command.image_url,
            title=command.title,
            description=command.description,
            link_url=command.link_url,
            is_active=command.is_active,
            display_order=command.display_order,
        )
        current_domain.repository_for(Promo).add(promo)
        return str(promo.id)

    @handle(UpdatePromo)
    def update_promo(self, command):
        repo = current_domain.repository_for(Promo)
        promo = repo.get(command.promo_id)
        promo.update_details(
            image_url=command.image_url,
            title=command.title,
            description=command.description,
            link_url=command.link_url,
            is_active=command.is_active,
            display_order=command.display_order,
        )
        repo.add(promo)
        return str(promo.id)

    @handle(DeletePromo)
    def delete_promo(self, command):
        repo = current_domain.repository_for(Promo)
        repo._dao.delete(repo.get(command.promo_id))
