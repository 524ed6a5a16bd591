"""Representative memorial returned for binary uploads.

PDF and DOCX parsing are not implemented; this text stands in for the
extracted content so the rest of the pipeline can run end to end.
"""

SAMPLE_MEMORIAL = """\
MEMORIAL DESCRITIVO DE SEGURANÇA CONTRA INCÊNDIO

1. DADOS GERAIS DO PROJETO
Projeto: Edifício Comercial
Área total: 2.500 m²
Número de pavimentos: 3
Altura: 12 metros
Ocupação: Comercial

2. SISTEMAS DE SEGURANÇA PREVISTOS

2.1 SAÍDAS DE EMERGÊNCIA
- Duas escadas de emergência com largura de 1,20m cada
- Portas corta-fogo com largura de 0,90m
- Sinalização de emergência conforme IT-008

2.2 SISTEMA DE EXTINTORES
- Extintores de água pressurizada (10L) - áreas comuns
- Extintores de pó químico (6kg) - áreas elétricas
- Distância máxima de 20m entre extintores

2.3 ILUMINAÇÃO DE EMERGÊNCIA
- Luminárias de emergência com autonomia de 1 hora
- Iluminamento mínimo de 5 lux nas rotas de fuga
- Sinalização fotoluminescente nas saídas

2.4 SISTEMA DE HIDRANTES
- Rede de hidrantes tipo 1
- Reservatório de incêndio: 15.000L
- Bomba de recalque: 30cv

3. OBSERVAÇÕES
Projeto elaborado conforme instruções técnicas do CB-PI vigentes.
Memorial sujeito à aprovação pelo Corpo de Bombeiros.
"""
