from gateway.views.handlers import (
    get_form as get_form,
)
from gateway.views.handlers import (
    get_game_accounts as get_game_accounts,
)
from gateway.views.handlers import (
    get_portal as get_portal,
)
from gateway.views.handlers import (
    post_login as post_login,
)
from gateway.views.handlers import (
    post_refresh_ticket as post_refresh_ticket,
)
