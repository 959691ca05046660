"""Feature-area stores built on Store. Construct them explicitly; none are singletons."""

from snapstate.stores.app import AppStore
from snapstate.stores.projects import ProjectStore
from snapstate.stores.social import SocialStore
from snapstate.stores.wallets import WalletStore

__all__ = ["AppStore", "ProjectStore", "SocialStore", "WalletStore"]
