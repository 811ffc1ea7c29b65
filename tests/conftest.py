"""Fixtures compartilhadas: app em SQLite de memoria e repositorios de teste."""

from datetime import datetime
from types import SimpleNamespace

import pytest

from app import create_app
from modelos import Cliente, db


class RepositorioEmMemoria:
    """Substituto do repositorio SQLAlchemy guardando tudo em dicionarios."""

    def __init__(self):
        self.clientes = {}
        self.pedidos = {}
        self.rollbacks = 0
        self._proximo_id = 1

    def adicionar_cliente(self, id, nome="Ana", sobrenome="Souza", cpf="111.222.333-44"):
        cliente = SimpleNamespace(id=id, nome=nome, sobrenome=sobrenome, cpf=cpf, pedidos=[])
        self.clientes[id] = cliente
        return cliente

    def _vincular(self, pedido):
        pedido.cliente = self.clientes.get(pedido.id_cliente)
        return pedido

    def listar_pedidos(self):
        return [self._vincular(self.pedidos[id]) for id in sorted(self.pedidos)]

    def buscar_pedido(self, id_pedido):
        pedido = self.pedidos.get(id_pedido)
        return self._vincular(pedido) if pedido else None

    def buscar_cliente(self, id_cliente, com_pedidos=False):
        cliente = self.clientes.get(id_cliente)
        if cliente and com_pedidos:
            cliente.pedidos = [
                self.pedidos[id] for id in sorted(self.pedidos)
                if self.pedidos[id].id_cliente == id_cliente
            ]
        return cliente

    def criar_pedido(self, **campos):
        if campos.get("id_cliente") is None:
            raise ValueError("id_cliente nao pode ser nulo")
        pedido = SimpleNamespace(
            id=self._proximo_id,
            data=campos.get("data") or datetime(2024, 1, 1),
            id_cliente=campos["id_cliente"],
            cliente=None,
        )
        self.pedidos[pedido.id] = pedido
        self._proximo_id += 1
        return pedido

    def atualizar_pedido(self, pedido, **campos):
        for nome, valor in campos.items():
            setattr(pedido, nome, valor)
        return pedido

    def excluir_pedido(self, pedido):
        del self.pedidos[pedido.id]

    def rollback(self):
        self.rollbacks += 1

    def ping(self):
        return None


class RepositorioComFalha:
    """Repositorio cujo banco esta sempre fora do ar."""

    def __init__(self):
        self.rollbacks = 0

    def _falhar(self, *args, **kwargs):
        raise RuntimeError("conexao recusada")

    listar_pedidos = _falhar
    buscar_pedido = _falhar
    buscar_cliente = _falhar
    criar_pedido = _falhar
    atualizar_pedido = _falhar
    excluir_pedido = _falhar
    ping = _falhar

    def rollback(self):
        self.rollbacks += 1


@pytest.fixture
def app():
    app = create_app({"SQLALCHEMY_DATABASE_URI": "sqlite://", "TESTING": True})
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clientes(app):
    """Clientes 5 e 7 ja cadastrados."""
    with app.app_context():
        db.session.add_all(
            [
                Cliente(id=5, nome="Maria", sobrenome="Silva", cpf="123.456.789-00"),
                Cliente(id=7, nome="Joao", sobrenome="Pereira", cpf="987.654.321-00"),
            ]
        )
        db.session.commit()
    return {"maria": 5, "joao": 7}


@pytest.fixture
def repositorio():
    return RepositorioEmMemoria()


@pytest.fixture
def repositorio_com_falha():
    return RepositorioComFalha()
