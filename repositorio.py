from sqlalchemy import text
from sqlalchemy.orm import joinedload, selectinload

from modelos import Cliente, Pedido


class RepositorioSQLAlchemy:
    """Persistencia de pedidos e clientes sobre uma sessao SQLAlchemy.

    Os handlers recebem uma instancia desta classe (ou de um substituto com
    a mesma interface) em vez de usar os modelos diretamente. Erros do banco
    nao sao tratados aqui: propagam para o handler, que faz o rollback via
    ``rollback()`` e converte a falha em resultado.
    """

    def __init__(self, session):
        self.session = session

    def listar_pedidos(self) -> list[Pedido]:
        return (
            self.session.query(Pedido)
            .options(joinedload(Pedido.cliente))
            .order_by(Pedido.id)
            .all()
        )

    def buscar_pedido(self, id_pedido: int) -> Pedido | None:
        return (
            self.session.query(Pedido)
            .options(joinedload(Pedido.cliente))
            .filter_by(id=id_pedido)
            .first()
        )

    def buscar_cliente(self, id_cliente: int, com_pedidos: bool = False) -> Cliente | None:
        if not com_pedidos:
            return self.session.get(Cliente, id_cliente)
        return (
            self.session.query(Cliente)
            .options(selectinload(Cliente.pedidos))
            .filter_by(id=id_cliente)
            .first()
        )

    def criar_pedido(self, **campos) -> Pedido:
        pedido = Pedido(**campos)
        self.session.add(pedido)
        self.session.commit()
        return pedido

    def atualizar_pedido(self, pedido: Pedido, **campos) -> Pedido:
        for nome, valor in campos.items():
            setattr(pedido, nome, valor)
        self.session.add(pedido)
        self.session.commit()
        return pedido

    def excluir_pedido(self, pedido: Pedido) -> None:
        self.session.delete(pedido)
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def ping(self) -> None:
        self.session.execute(text("SELECT 1"))
