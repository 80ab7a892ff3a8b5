"""
Fixed-width big-endian packing into caller-owned byte buffers.

Includes the append_* writers, matching read_* decoders, and a FrameBuilder
for assembling a complete binary frame.
"""
