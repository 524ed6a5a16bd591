"""Initial technical instructions loaded into a fresh catalog."""

from __future__ import annotations

from cbpi.instructions.catalog import Instruction

SEED_INSTRUCTIONS: list[Instruction] = [
    Instruction(
        code="IT-001/2019",
        title="Procedimentos Administrativos",
        description="Estabelece critérios para tramitação de processos de análise de projetos",
        category="Geral",
        tags=["procedimentos", "administrativo"],
        keywords=["tramitação", "processos", "memorial", "documentação"],
        popular=True,
        views=1250,
    ),
    Instruction(
        code="IT-008/2019",
        title="Saídas de Emergência",
        description="Dimensionamento, quantidade e largura mínima das saídas de emergência",
        category="Saídas de Emergência",
        tags=["segurança", "emergência"],
        keywords=["escada", "rota de fuga", "largura", "porta corta-fogo"],
        popular=True,
        views=980,
    ),
    Instruction(
        code="IT-018/2019",
        title="Iluminação de Emergência",
        description="Requisitos de autonomia e iluminamento do sistema de iluminação de emergência",
        category="Iluminação",
        tags=["iluminação", "emergência"],
        keywords=["autonomia", "luminária", "lux"],
        popular=True,
        views=640,
    ),
    Instruction(
        code="IT-021/2019",
        title="Sistema de Proteção por Extintores de Incêndio",
        description="Tipos, capacidade extintora e distribuição de extintores portáteis",
        category="Extintores",
        tags=["extintores", "segurança"],
        keywords=["pó químico", "água pressurizada", "co2", "distância"],
        popular=False,
        views=720,
    ),
    Instruction(
        code="IT-022/2019",
        title="Sistemas de Hidrantes e de Mangotinhos para Combate a Incêndio",
        description="Dimensionamento de hidrantes, reserva técnica de incêndio e bombas",
        category="Hidrantes",
        tags=["hidrantes", "segurança"],
        keywords=["reserva técnica", "vazão", "pressão", "mangotinho"],
        popular=False,
        views=410,
    ),
]
