import logging

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

import pedidos
from pedidos import FalhaPersistencia, NaoEncontrado

logger = logging.getLogger("pedidos_app")

EXTENSAO_REPOSITORIO = "pedidos_repositorio"

bp = Blueprint("pedidos", __name__)


def repositorio_atual():
    return current_app.extensions[EXTENSAO_REPOSITORIO]


def responder(resultado):
    if isinstance(resultado, NaoEncontrado):
        return jsonify({"message": resultado.message}), 404
    if isinstance(resultado, FalhaPersistencia):
        return jsonify({"message": resultado.message}), 500
    return jsonify(resultado.valor), resultado.status


def _corpo() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


# =====================================================
# ROTAS
# =====================================================
@bp.route("/pedidos", methods=["GET"])
def api_listar_pedidos():
    return responder(pedidos.listar_pedidos(repositorio_atual()))


@bp.route("/pedidos", methods=["POST"])
def api_incluir_pedido():
    return responder(pedidos.incluir_pedido(repositorio_atual(), _corpo()))


@bp.route("/pedidos/<int:id_pedido>", methods=["GET"])
def api_pedido_detalhe(id_pedido):
    return responder(pedidos.get_pedido_by_id(repositorio_atual(), id_pedido))


@bp.route("/pedidos/<int:id_pedido>", methods=["PUT"])
def api_atualizar_pedido(id_pedido):
    return responder(pedidos.atualizar_pedido(repositorio_atual(), id_pedido, _corpo()))


@bp.route("/pedidos/<int:id_pedido>", methods=["DELETE"])
def api_excluir_pedido(id_pedido):
    return responder(pedidos.excluir_pedido(repositorio_atual(), id_pedido))


@bp.route("/clientes/<int:id_cliente>/pedidos", methods=["GET"])
def api_cliente_com_pedidos(id_cliente):
    return responder(pedidos.get_cliente_com_pedidos(repositorio_atual(), id_cliente))


@bp.route("/clientes/<int:id_cliente>/pedidos", methods=["POST"])
def api_criar_pedido_para_cliente(id_cliente):
    return responder(
        pedidos.criar_pedido_para_cliente(repositorio_atual(), id_cliente, _corpo())
    )


@bp.route("/health")
def health():
    try:
        repositorio_atual().ping()
        return jsonify({"status": "ok"})
    except Exception:
        logger.exception("Falha no health check")
        return jsonify({"status": "error"}), 500


def http_error(exc: HTTPException):
    return jsonify({"message": exc.description}), exc.code
