"""Storefront domain — identity, catalogue, inventory, ordering and notifications.

Every context registers its elements on this one domain. Fulfilling an order
changes its status and withdraws stock inside a single unit of work.
"""

from protean.domain import Domain

storefront = Domain(name="storefront")
