import vulkan as vk

VERTEX_FORMAT_MAP = {
    'vec2': (vk.VK_FORMAT_R32G32_SFLOAT, 8),
    'vec3': (vk.VK_FORMAT_R32G32B32_SFLOAT, 12),
    'vec4': (vk.VK_FORMAT_R32G32B32A32_SFLOAT, 16),
}


class RenderPass:

    def __init__(self, device, image_format, clear_color=(0.0, 0.0, 1.0, 1.0), final_layout=vk.VK_IMAGE_LAYOUT_PRESENT_SRC_KHR):
        self.device = device
        self.format = image_format
        self.clear_color = clear_color

        color_attachment = vk.VkAttachmentDescription(
            format=image_format,
            samples=vk.VK_SAMPLE_COUNT_1_BIT,
            loadOp=vk.VK_ATTACHMENT_LOAD_OP_CLEAR,
            storeOp=vk.VK_ATTACHMENT_STORE_OP_STORE,
            stencilLoadOp=vk.VK_ATTACHMENT_LOAD_OP_DONT_CARE,
            stencilStoreOp=vk.VK_ATTACHMENT_STORE_OP_DONT_CARE,
            initialLayout=vk.VK_IMAGE_LAYOUT_UNDEFINED,
            finalLayout=final_layout,
        )
        color_attachment_ref = vk.VkAttachmentReference(
            attachment=0,
            layout=vk.VK_IMAGE_LAYOUT_COLOR_ATTACHMENT_OPTIMAL
        )
        subpass = vk.VkSubpassDescription(
            pipelineBindPoint=vk.VK_PIPELINE_BIND_POINT_GRAPHICS,
            colorAttachmentCount=1,
            pColorAttachments=[color_attachment_ref]
        )
        # the acquire semaphore is waited at COLOR_ATTACHMENT_OUTPUT, so the
        # layout transition has to wait there too
        dependency = vk.VkSubpassDependency(
            srcSubpass=vk.VK_SUBPASS_EXTERNAL,
            dstSubpass=0,
            srcStageMask=vk.VK_PIPELINE_STAGE_COLOR_ATTACHMENT_OUTPUT_BIT,
            srcAccessMask=0,
            dstStageMask=vk.VK_PIPELINE_STAGE_COLOR_ATTACHMENT_OUTPUT_BIT,
            dstAccessMask=vk.VK_ACCESS_COLOR_ATTACHMENT_WRITE_BIT,
        )
        self._vk_render_pass = vk.vkCreateRenderPass(
            self.device._vk_device,
            vk.VkRenderPassCreateInfo(
                attachmentCount=1,
                pAttachments=[color_attachment],
                subpassCount=1,
                pSubpasses=[subpass],
                dependencyCount=1,
                pDependencies=[dependency]
            ), None
        )
        self._vk_clear_value = vk.VkClearValue(color=vk.VkClearColorValue(float32=list(clear_color)))

    def start(self, command_buffer, framebuffer, extent):
        return PassContext(self, command_buffer, framebuffer, extent)

    def destroy(self):
        vk.vkDestroyRenderPass(self.device._vk_device, self._vk_render_pass, None)


class PassContext:

    def __init__(self, render_pass, command_buffer, framebuffer, extent):
        self.render_pass = render_pass
        self.command_buffer = command_buffer
        self.framebuffer = framebuffer
        self.extent = extent

    def __enter__(self):
        vk.vkCmdBeginRenderPass(
            self.command_buffer._vk_command_buffer, vk.VkRenderPassBeginInfo(
                renderPass=self.render_pass._vk_render_pass, framebuffer=self.framebuffer,
                renderArea=vk.VkRect2D(offset=vk.VkOffset2D(x=0, y=0), extent=self.extent),
                clearValueCount=1, pClearValues=[self.render_pass._vk_clear_value]
            ),
            vk.VK_SUBPASS_CONTENTS_INLINE
        )
        return self

    def __exit__(self, *args):
        vk.vkCmdEndRenderPass(self.command_buffer._vk_command_buffer)


class GraphicsPipeline:
    """Graphics pipeline with the viewport baked in.

    The viewport is fixed at creation, so the pipeline has to be rebuilt
    whenever the window size changes.
    """

    def __init__(self, device, vertex_shader, fragment_shader, render_pass, viewport,
                 vertex_attributes=None, push_constant_size=0):
        self.device = device
        self.viewport = viewport
        self.vertex_attributes = vertex_attributes or []

        stride = sum(VERTEX_FORMAT_MAP[attr][1] for attr in self.vertex_attributes)
        attribute_descriptions = []
        offset = 0
        for i, attr in enumerate(self.vertex_attributes):
            fmt, size = VERTEX_FORMAT_MAP[attr]
            attribute_descriptions.append(vk.VkVertexInputAttributeDescription(
                binding=0, location=i, format=fmt, offset=offset
            ))
            offset += size
        bindings = [vk.VkVertexInputBindingDescription(
            binding=0, stride=stride, inputRate=vk.VK_VERTEX_INPUT_RATE_VERTEX
        )] if self.vertex_attributes else []

        vs_inputs = vk.VkPipelineVertexInputStateCreateInfo(
            vertexBindingDescriptionCount=len(bindings), pVertexBindingDescriptions=bindings or None,
            vertexAttributeDescriptionCount=len(attribute_descriptions),
            pVertexAttributeDescriptions=attribute_descriptions or None
        )
        input_assembly_ci = vk.VkPipelineInputAssemblyStateCreateInfo(
            topology=vk.VK_PRIMITIVE_TOPOLOGY_TRIANGLE_LIST,
            primitiveRestartEnable=vk.VK_FALSE
        )
        scissor = vk.VkRect2D(
            offset=vk.VkOffset2D(x=0, y=0),
            extent=vk.VkExtent2D(width=int(viewport.width), height=int(viewport.height))
        )
        viewport_state_ci = vk.VkPipelineViewportStateCreateInfo(
            viewportCount=1, pViewports=[viewport],
            scissorCount=1, pScissors=[scissor]
        )
        rasterizer_ci = vk.VkPipelineRasterizationStateCreateInfo(
            depthClampEnable=vk.VK_FALSE,
            rasterizerDiscardEnable=vk.VK_FALSE,
            polygonMode=vk.VK_POLYGON_MODE_FILL,
            lineWidth=1.0,
            cullMode=vk.VK_CULL_MODE_NONE,
            frontFace=vk.VK_FRONT_FACE_CLOCKWISE
        )
        multisampling_ci = vk.VkPipelineMultisampleStateCreateInfo(
            sampleShadingEnable=vk.VK_FALSE,
            rasterizationSamples=vk.VK_SAMPLE_COUNT_1_BIT
        )
        color_blend_ci = vk.VkPipelineColorBlendStateCreateInfo(
            logicOpEnable=vk.VK_FALSE,
            attachmentCount=1,
            pAttachments=[vk.VkPipelineColorBlendAttachmentState(
                colorWriteMask=vk.VK_COLOR_COMPONENT_R_BIT | vk.VK_COLOR_COMPONENT_G_BIT | vk.VK_COLOR_COMPONENT_B_BIT | vk.VK_COLOR_COMPONENT_A_BIT,
                blendEnable=vk.VK_FALSE
            )],
            blendConstants=[0.0, 0.0, 0.0, 0.0]
        )

        push_constant_ranges = [vk.VkPushConstantRange(
            stageFlags=vk.VK_SHADER_STAGE_VERTEX_BIT | vk.VK_SHADER_STAGE_FRAGMENT_BIT,
            offset=0, size=push_constant_size
        )] if push_constant_size else []
        self._vk_pipeline_layout = vk.vkCreatePipelineLayout(
            self.device._vk_device,
            vk.VkPipelineLayoutCreateInfo(
                setLayoutCount=0,
                pushConstantRangeCount=len(push_constant_ranges),
                pPushConstantRanges=push_constant_ranges or None
            ), None
        )

        shader_stages = [vertex_shader._vk_stage, fragment_shader._vk_stage]
        self._vk_pipeline = vk.vkCreateGraphicsPipelines(
            self.device._vk_device,
            vk.VK_NULL_HANDLE,
            1,
            [vk.VkGraphicsPipelineCreateInfo(
                stageCount=len(shader_stages),
                pStages=shader_stages,
                pVertexInputState=vs_inputs,
                pInputAssemblyState=input_assembly_ci,
                pViewportState=viewport_state_ci,
                pRasterizationState=rasterizer_ci,
                pMultisampleState=multisampling_ci,
                pDepthStencilState=None,
                pColorBlendState=color_blend_ci,
                pDynamicState=None,
                layout=self._vk_pipeline_layout,
                renderPass=render_pass._vk_render_pass,
                subpass=0
            )],
            None
        )[0]

    def bind(self, command_buffer):
        vk.vkCmdBindPipeline(command_buffer._vk_command_buffer, vk.VK_PIPELINE_BIND_POINT_GRAPHICS, self._vk_pipeline)

    def destroy(self):
        vk.vkDestroyPipeline(self.device._vk_device, self._vk_pipeline, None)
        vk.vkDestroyPipelineLayout(self.device._vk_device, self._vk_pipeline_layout, None)


class ComputePipeline:

    def __init__(self, device, compute_shader, descriptor_sets=None):
        self.device = device
        self.descriptor_sets = descriptor_sets or []
        layouts = [x._vk_descriptor_set_layout for x in self.descriptor_sets]
        self._vk_pipeline_layout = vk.vkCreatePipelineLayout(
            self.device._vk_device,
            vk.VkPipelineLayoutCreateInfo(
                setLayoutCount=len(layouts),
                pSetLayouts=layouts or None
            ), None
        )
        self._vk_pipeline = vk.vkCreateComputePipelines(
            self.device._vk_device,
            vk.VK_NULL_HANDLE,
            1,
            [vk.VkComputePipelineCreateInfo(
                stage=compute_shader._vk_stage,
                layout=self._vk_pipeline_layout
            )],
            None
        )[0]

    def bind(self, command_buffer):
        vk.vkCmdBindPipeline(command_buffer._vk_command_buffer, vk.VK_PIPELINE_BIND_POINT_COMPUTE, self._vk_pipeline)
        for i, descriptor_set in enumerate(self.descriptor_sets):
            descriptor_set.bind(command_buffer, self, vk.VK_PIPELINE_BIND_POINT_COMPUTE, first_set=i)

    def destroy(self):
        vk.vkDestroyPipeline(self.device._vk_device, self._vk_pipeline, None)
        vk.vkDestroyPipelineLayout(self.device._vk_device, self._vk_pipeline_layout, None)
