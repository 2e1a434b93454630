from .volume import VolumeMix, compute_mix, mix_for

__all__ = ["VolumeMix", "compute_mix", "mix_for"]
