from .strongarm import (
    InputKind,
    StrongArm,
    StrongArmParams,
    StrongArmWithOutputBuffers,
    StrongArmWithOutputBuffersParams,
)
from .tb import ComparatorDecision, StrongArmTranTb, comparator_decision, strongarm_tran_tb
