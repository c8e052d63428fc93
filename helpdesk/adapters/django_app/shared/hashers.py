"""PasswordHasher implementado com os hashers do Django (PASSWORD_HASHERS)."""

from django.contrib.auth.hashers import check_password, make_password


class DjangoPasswordHasher:
    """Adapter do port PasswordHasher."""

    def hash(self, senha: str) -> str:
        return make_password(senha)

    def verificar(self, senha: str, senha_hash: str) -> bool:
        if not senha_hash:
            return False
        return check_password(senha, senha_hash)
