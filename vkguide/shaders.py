import logging
import subprocess
import tempfile
from pathlib import Path

import numpy as np
import vulkan as vk

from .errors import ShaderCompileError

logger = logging.getLogger(__name__)

STAGE_SUFFIXES = {'.vert': 'vertex', '.frag': 'fragment', '.comp': 'compute'}


class Shader:

    def __init__(self, device, source: str | Path, stage_name: str = None):
        self.device = device
        self.source = Path(source)
        self.stage_name = stage_name or STAGE_SUFFIXES.get(self.source.suffix)
        if self.stage_name is None:
            raise ShaderCompileError(f"Can't tell the shader stage of {self.source}")
        self.code = self.source.read_text()
        self.spirv = self.compile().tobytes()
        self._vk_module = vk.vkCreateShaderModule(
            self.device._vk_device,
            vk.VkShaderModuleCreateInfo(
                codeSize=len(self.spirv),
                pCode=self.spirv
            ),
            None
        )
        self._vk_stage = vk.VkPipelineShaderStageCreateInfo(
            stage=getattr(vk, f'VK_SHADER_STAGE_{self.stage_name.upper()}_BIT'),
            module=self._vk_module, pName='main'
        )

    def compile(self):
        with tempfile.TemporaryDirectory() as tmp:
            outfile = Path(tmp) / 'shader.spv'
            try:
                result = subprocess.run(
                    ['glslc', f'-fshader-stage={self.stage_name}', '-', '-o', str(outfile)],
                    input=self.code,
                    check=True,
                    capture_output=True,
                    text=True
                )
            except FileNotFoundError:
                raise ShaderCompileError(
                    'glslc not found. Please install the Vulkan SDK and ensure glslc is in your PATH.',
                    stage=self.stage_name
                )
            except subprocess.CalledProcessError as e:
                raise ShaderCompileError(
                    f'Compiling {self.source} failed:\n{e.stderr}', stage=self.stage_name, stderr=e.stderr
                ) from e

            if result.stderr:
                logger.warning('glslc warnings for %s: %s', self.source, result.stderr)
            spirv = np.fromfile(outfile, dtype=np.uint32)

        logger.debug('Compiled %s shader %s (%d words)', self.stage_name, self.source, len(spirv))
        return spirv

    def destroy(self):
        vk.vkDestroyShaderModule(self.device._vk_device, self._vk_module, None)
