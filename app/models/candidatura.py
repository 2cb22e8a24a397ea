from sqlalchemy import Boolean, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base

class Candidatura(Base):
    __tablename__ = "candidaturas"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    telefone: Mapped[str] = mapped_column(String(30), nullable=False)
    idade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cidade: Mapped[str | None] = mapped_column(String(120), nullable=True)
    experiencia: Mapped[str | None] = mapped_column(Text, nullable=True)
    disponibilidade: Mapped[str | None] = mapped_column(String(60), nullable=True)
    foto_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    termos: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    extra_fields: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    timestamp: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
