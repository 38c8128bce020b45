# artisan_cart/services/cart_service.py
import threading
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List

from artisan_cart.domain import cart
from artisan_cart.domain.errors import RemoteCallError
from artisan_cart.domain.schemas import BadgeUpdate, CartItem, ProductRef
from artisan_cart.repos.local_cart_repo import LocalCartRepo
from artisan_cart.services.cart_backends import GuestCartBackend, RemoteCartBackend
from artisan_cart.services.cart_client import CartApiClient
from artisan_cart.services.events import Subscribers
from artisan_cart.services.lock_service import CART_WIDE, ItemLockService
from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)


class CartState(str, Enum):
    GUEST = "GUEST"
    TRANSFERRING = "TRANSFERRING"
    AUTHENTICATED = "AUTHENTICATED"


class CartService:
    """
    Kontroler synchronizacji koszyka dla jednej sesji.

    Jedno API koszyka (add, remove, update, clear, refresh), a pod spodem
    storage goscia albo zdalny koszyk, zaleznie od stanu sesji.
    Po zalogowaniu koszyk goscia jest przenoszony na backend, najwyzej raz.
    """

    def __init__(
        self,
        repo: LocalCartRepo,
        cart_client: CartApiClient,
        is_authenticated: bool = False,
        lock_service: ItemLockService | None = None,
        id_factory: Callable[[], int | str] | None = None,
    ):
        self.repo = repo
        self.cart_client = cart_client
        self.lock_service = lock_service or ItemLockService()

        self.guest_backend = GuestCartBackend(repo, id_factory=id_factory)
        self.remote_backend = RemoteCartBackend(cart_client)

        self.badge_events: Subscribers[BadgeUpdate] = Subscribers("cart badge")

        self._items: List[CartItem] = []
        self._state_lock = threading.RLock()
        self._pending = 0

        self._authenticated = is_authenticated
        self._transferred = False
        self.transfer_error: RemoteCallError | None = None
        self.state = CartState.AUTHENTICATED if is_authenticated else CartState.GUEST

        #gosc: stan z lokalnego slotu od razu, zalogowany: dopiero po refresh_cart()
        if self.state is CartState.GUEST:
            self._items = self.guest_backend.load()

    # ----- odczyt -----

    @property
    def items(self) -> List[CartItem]:
        with self._state_lock:
            return list(self._items)

    @property
    def total_items(self) -> int:
        return cart.total_items(self.items)

    @property
    def total_amount(self) -> Decimal:
        return cart.total_amount(self.items)

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    @property
    def has_transferred(self) -> bool:
        return self._transferred

    @property
    def last_known_item_count(self) -> int:
        """Liczba z slotu cart_item_count, dla badge zanim koszyk zostanie pobrany."""
        return self.repo.load_item_count()

    def subscribe(self, callback: Callable[[BadgeUpdate], None]) -> Callable[[], None]:
        return self.badge_events.subscribe(callback)

    # ----- komendy -----

    def add_to_cart(self, product: ProductRef | Dict[str, Any], quantity: int = 1) -> None:
        if not isinstance(product, ProductRef):
            product = ProductRef.from_payload(product)
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        logger.info(f"Add product {product.id} x{quantity} ({self.state.value})")
        self._mutate(product.id, lambda backend, items: backend.add(items, product, quantity))

    def remove_from_cart(self, product_id: int) -> None:
        logger.info(f"Remove product {product_id} ({self.state.value})")
        self._mutate(product_id, lambda backend, items: backend.remove(items, product_id))

    def update_quantity(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return

        logger.info(f"Update product {product_id} to {quantity} ({self.state.value})")
        self._mutate(
            product_id,
            lambda backend, items: backend.update(items, product_id, quantity),
        )

    def clear_cart(self) -> None:
        logger.info(f"Clear cart ({self.state.value})")
        self._mutate(CART_WIDE, lambda backend, items: backend.clear(items))

    def refresh_cart(self) -> None:
        self._mutate(CART_WIDE, lambda backend, items: backend.load())

    def _backend(self) -> GuestCartBackend | RemoteCartBackend:
        if self.state is CartState.GUEST:
            return self.guest_backend
        return self.remote_backend

    def _mutate(self, key: Any, operation: Callable[[Any, List[CartItem]], List[CartItem]]) -> None:
        update = None
        with self.lock_service.hold(key):
            #wybor backendu i zapis slotu goscia pod jednym lockiem, transfer nie wejdzie w srodek
            with self._state_lock:
                backend = self._backend()
                if backend is self.guest_backend:
                    update = self._commit(operation(backend, self.items))

            if backend is self.remote_backend:
                self._begin()
                try:
                    # wyjatek z backendu -> lokalny stan bez zmian
                    items = operation(backend, self.items)
                finally:
                    self._end()
                update = self._commit(items)

        #subskrybenci dopiero po zwolnieniu lockow, moga wolac kontroler
        self._publish(update)

    def _begin(self) -> None:
        with self._state_lock:
            self._pending += 1

    def _end(self) -> None:
        with self._state_lock:
            self._pending -= 1

    def _commit(self, items: List[CartItem]) -> BadgeUpdate | None:
        with self._state_lock:
            before = cart.total_items(self._items)
            self._items = list(items)
            after = cart.total_items(self._items)

        self.repo.save_item_count(after)
        if after != before:
            return BadgeUpdate(count=after)
        return None

    def _publish(self, update: BadgeUpdate | None) -> None:
        if update is not None:
            self.badge_events.publish(update)

    # ----- sesja -----

    def set_authenticated(self, authenticated: bool) -> None:
        was_authenticated = self._authenticated
        self._authenticated = authenticated

        logger.info(
            f"Auth state change: was={was_authenticated} now={authenticated} "
            f"transferred={self._transferred}"
        )

        if (
            authenticated
            and not was_authenticated
            and not self._transferred
            and self.state is CartState.GUEST
        ):
            self.transfer_guest_cart()
            return

        if not authenticated and self.state is not CartState.GUEST:
            #wylogowanie = pelny reload strony, ten kontroler nie wraca do GUEST
            logger.warning("Ignoring logout signal, session stays authenticated until reload")

    def transfer_guest_cart(self) -> None:
        """
        Jednorazowe przeniesienie koszyka goscia na backend:
        1. pusty lub brak slotu -> koniec, bez wywolania sieciowego
        2. cala lista pozycji w jednym wywolaniu
        3. sukces -> czyszczenie slotow, pelny reload z serwera
        4. blad -> sesja i tak oznaczona jako przeniesiona, koszyk goscia zostaje
        """
        update = None
        transferred_ok = False

        with self.lock_service.hold(CART_WIDE):
            if self._transferred:
                return

            try:
                #zmiana stanu i odczyt slotu razem, zapisy goscia w toku koncza sie wczesniej
                with self._state_lock:
                    self.state = CartState.TRANSFERRING
                    had_slot = self.repo.has_items_slot()
                    guest_items = self.repo.load_items()

                if not guest_items:
                    logger.info("No guest cart to transfer")
                    if had_slot:
                        self.repo.clear()
                    update = self._commit([])
                else:
                    logger.info(f"Transferring {len(guest_items)} guest cart items")
                    self._begin()
                    try:
                        self.cart_client.transfer(guest_items)
                    finally:
                        self._end()

                    self.repo.clear()
                    transferred_ok = True
                    logger.info("Guest cart transferred")

            except RemoteCallError as e:
                #bez retry, koszyk goscia zostaje w slocie
                logger.error(f"Guest cart transfer failed, guest cart left in storage: {e}")
                self.transfer_error = e

            finally:
                self._finish_transfer()

        self._publish(update)
        if transferred_ok:
            self.refresh_cart()
        elif self.transfer_error is not None:
            self._publish(self._commit([]))

    def _finish_transfer(self) -> None:
        with self._state_lock:
            self._transferred = True
            self.state = CartState.AUTHENTICATED
