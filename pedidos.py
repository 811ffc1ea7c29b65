"""Handlers de pedidos.

Cada handler recebe o repositorio como primeiro argumento e devolve um
resultado (``Sucesso``, ``NaoEncontrado`` ou ``FalhaPersistencia``). A
conversao para resposta HTTP fica em ``rotas.responder``.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import wraps
from typing import Any

logger = logging.getLogger("pedidos_app")

MSG_CLIENTE_NAO_ENCONTRADO = "Cliente não encontrado"
MSG_PEDIDO_NAO_ENCONTRADO = "Pedido não encontrado"
MSG_PEDIDO_EXCLUIDO = "Pedido excluído com sucesso"

EPOCH = datetime(1970, 1, 1)


# =====================================================
# RESULTADOS
# =====================================================
@dataclass(frozen=True)
class Sucesso:
    valor: Any
    status: int = 200


@dataclass(frozen=True)
class NaoEncontrado:
    message: str


@dataclass(frozen=True)
class FalhaPersistencia:
    message: str


def tratar_falha(mensagem: str):
    """Converte qualquer excecao do handler em ``FalhaPersistencia``.

    A sessao e revertida e o erro original vai apenas para o log.
    """

    def decorator(handler):
        @wraps(handler)
        def wrapper(repositorio, *args, **kwargs):
            try:
                return handler(repositorio, *args, **kwargs)
            except Exception:
                repositorio.rollback()
                logger.exception(mensagem)
                return FalhaPersistencia(mensagem)

        return wrapper

    return decorator


# =====================================================
# SERIALIZACAO
# =====================================================
def parse_data(valor):
    """Converte a data recebida no corpo para datetime ingenuo em UTC.

    Aceita o que ``datetime.fromisoformat`` aceita no Python 3.11 (data
    simples, data e hora, fracao de segundos, offset ou sufixo ``Z``) e
    numeros como epoch em milissegundos. ``None`` passa direto.
    """
    if valor is None or isinstance(valor, datetime):
        data = valor
    elif isinstance(valor, (int, float)) and not isinstance(valor, bool):
        # epoch em milissegundos
        data = datetime.fromtimestamp(valor / 1000, tz=timezone.utc)
    else:
        texto = str(valor).strip()
        if texto.endswith(("Z", "z")):
            texto = texto[:-1] + "+00:00"
        data = datetime.fromisoformat(texto)
    if data is not None and data.tzinfo is not None:
        data = data.astimezone(timezone.utc).replace(tzinfo=None)
    return data


def _formatar_data(valor: datetime | None) -> str | None:
    # valores gravados em UTC
    return valor.isoformat(timespec="milliseconds") + "Z" if valor else None


def serializar_pedido(pedido) -> dict:
    return {
        "id": pedido.id,
        "data": _formatar_data(pedido.data),
        "id_cliente": pedido.id_cliente,
    }


def serializar_cliente(cliente) -> dict | None:
    if not cliente:
        return None
    return {
        "id": cliente.id,
        "nome": cliente.nome,
        "sobrenome": cliente.sobrenome,
        "cpf": cliente.cpf,
    }


def _pedido_e_cliente(pedido) -> dict:
    return {
        "pedido": {"id": pedido.id, "data": _formatar_data(pedido.data)},
        "cliente": serializar_cliente(pedido.cliente),
    }


def _campos_pedido(corpo: dict, *nomes: str) -> dict:
    # chaves ausentes ficam de fora; o ORM aplica default ou mantem o valor atual
    campos = {nome: corpo[nome] for nome in nomes if nome in corpo}
    if "data" in campos:
        campos["data"] = parse_data(campos["data"])
    return campos


def _data_obrigatoria(corpo: dict) -> datetime:
    if "data" not in corpo:
        raise ValueError("data do pedido nao informada")
    if corpo["data"] is None:
        # null vira o instante zero, como epoch 0
        return EPOCH
    return parse_data(corpo["data"])


# =====================================================
# HANDLERS
# =====================================================
@tratar_falha("Erro ao listar pedidos")
def listar_pedidos(repositorio):
    pedidos = repositorio.listar_pedidos()
    return Sucesso({"pedidos": [_pedido_e_cliente(pedido) for pedido in pedidos]})


@tratar_falha("Erro ao criar pedido para cliente")
def criar_pedido_para_cliente(repositorio, id_cliente: int, corpo: dict):
    cliente = repositorio.buscar_cliente(id_cliente)
    if not cliente:
        return NaoEncontrado(MSG_CLIENTE_NAO_ENCONTRADO)

    pedido = repositorio.criar_pedido(id_cliente=id_cliente, data=_data_obrigatoria(corpo))
    return Sucesso(serializar_pedido(pedido), status=201)


@tratar_falha("Erro ao buscar cliente com pedidos")
def get_cliente_com_pedidos(repositorio, id_cliente: int):
    cliente = repositorio.buscar_cliente(id_cliente, com_pedidos=True)
    if not cliente:
        return NaoEncontrado(MSG_CLIENTE_NAO_ENCONTRADO)

    payload = serializar_cliente(cliente)
    payload["Pedidos"] = [serializar_pedido(pedido) for pedido in cliente.pedidos]
    return Sucesso(payload)


@tratar_falha("Erro ao buscar pedido")
def get_pedido_by_id(repositorio, id_pedido: int):
    pedido = repositorio.buscar_pedido(id_pedido)
    if not pedido:
        return NaoEncontrado(MSG_PEDIDO_NAO_ENCONTRADO)
    return Sucesso(_pedido_e_cliente(pedido))


@tratar_falha("Erro ao incluir pedido")
def incluir_pedido(repositorio, corpo: dict):
    # sem verificacao de cliente: a integridade fica a cargo do banco
    campos = _campos_pedido(corpo, "data", "id_cliente")
    pedido = repositorio.criar_pedido(**campos)
    return Sucesso(serializar_pedido(pedido), status=201)


@tratar_falha("Erro ao atualizar pedido")
def atualizar_pedido(repositorio, id_pedido: int, corpo: dict):
    pedido = repositorio.buscar_pedido(id_pedido)
    if not pedido:
        return NaoEncontrado(MSG_PEDIDO_NAO_ENCONTRADO)

    campos = _campos_pedido(corpo, "data", "id_cliente")
    pedido = repositorio.atualizar_pedido(pedido, **campos)
    return Sucesso(serializar_pedido(pedido))


@tratar_falha("Erro ao excluir pedido")
def excluir_pedido(repositorio, id_pedido: int):
    pedido = repositorio.buscar_pedido(id_pedido)
    if not pedido:
        return NaoEncontrado(MSG_PEDIDO_NAO_ENCONTRADO)

    repositorio.excluir_pedido(pedido)
    return Sucesso({"message": MSG_PEDIDO_EXCLUIDO})
