"""TextureGen backend"""
