# Rate limiting configuration for Taskboard
# Использует slowapi для защиты API от перебора паролей и абуза поиска

from slowapi import Limiter
from slowapi.util import get_remote_address

# Инициализация лимитера с использованием IP адреса клиента
limiter = Limiter(key_func=get_remote_address)

# Предустановленные лимиты для различных типов операций
RATE_LIMITS = {
    # Аутентификация (регистрация, логин, смена пароля)
    "auth_operations": "20/minute",
    # Поиск пользователей для автодополнения при приглашении
    "search_operations": "60/minute",
}

__all__ = ["limiter", "RATE_LIMITS"]
