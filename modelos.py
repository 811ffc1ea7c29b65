from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


# =====================================================
# MODELOS
# =====================================================
class Cliente(db.Model):
    __tablename__ = "clientes"
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    sobrenome = db.Column(db.String(255), nullable=False)
    cpf = db.Column(db.String(14), nullable=False)

    pedidos = db.relationship(
        "Pedido",
        back_populates="cliente",
        order_by="Pedido.id",
        lazy="selectin",
    )


class Pedido(db.Model):
    __tablename__ = "pedidos"
    id = db.Column(db.Integer, primary_key=True)
    data = db.Column(db.DateTime(timezone=False), default=datetime.utcnow, nullable=False)
    id_cliente = db.Column(
        db.Integer,
        db.ForeignKey("clientes.id"),
        nullable=False,
        index=True,
    )

    cliente = db.relationship("Cliente", back_populates="pedidos")
