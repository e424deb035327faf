"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/config.py
Fixed constants of the detection pipeline and the classifier layout.
"""


class DetectionConfig:
    BYTES_PER_MESSAGE = 32
    FEATURE_SIZE = 2 * BYTES_PER_MESSAGE  # 64

    # Dense layer widths: 64 → 128 → 64 → 1
    LAYER_SIZES = (FEATURE_SIZE, 128, 64, 1)
    # Dropout after the first and second dense layer, inert during inference
    DROPOUT_RATES = (0.3, 0.2)

    DEFAULT_ALGORITHM = "md5"
    DEFAULT_SEED = 0

    @staticmethod
    def get_layer_shapes():
        """
        Returns ((W1, b1), (W2, b2), (W3, b3)) shapes.
        Weights are stored (inputs, outputs) so a layer computes x @ W + b.
        """
        sizes = DetectionConfig.LAYER_SIZES
        return tuple(
            ((sizes[i], sizes[i + 1]), (sizes[i + 1],))
            for i in range(len(sizes) - 1)
        )
