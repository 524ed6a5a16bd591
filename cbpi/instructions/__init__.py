"""Catalog of CB-PI technical instructions cited by the compliance rules."""

from cbpi.instructions.catalog import Instruction, InstructionCatalog

__all__ = ["Instruction", "InstructionCatalog"]
