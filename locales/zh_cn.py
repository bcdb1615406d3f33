"""
zh-CN strings used by the pages
"""

MESSAGES = {
    "messages": {
        "success": {
            "login": "登录成功",
            "register": "注册成功！请查收邮箱激活账户",
            "logout": "已成功退出登录",
            "passwordReset": "密码重置成功，请使用新密码登录",
            "passwordChanged": "密码修改成功",
            "profileUpdated": "个人资料已更新",
            "emailVerified": "邮箱验证成功",
            "resetLinkSent": "重置密码链接已发送到您的邮箱，请查收",
            "verificationSent": "验证邮件已发送，请查收您的邮箱！",
            "userActivated": "用户已激活",
            "userDeactivated": "用户已停用",
            "roleGranted": "已设为管理员",
            "roleRevoked": "已取消管理员权限",
        },
        "error": {
            "general": "发生错误，请稍后重试",
            "login": "登录失败，请检查用户名和密码",
            "accountInactive": "账户已被禁用，请联系管理员",
            "invalidResetLink": "无效的重置密码链接，请重新发起找回密码请求",
            "invalidVerifyLink": "无效的验证链接",
            "verifyFailed": "验证邮箱失败，请重新尝试",
            "passwordMismatch": "两次输入的密码不一致",
            "passwordTooShort": "密码长度至少为{min}位",
            "emailInUse": "该邮箱已被注册",
            "usernameInUse": "该用户名已被使用",
            "unauthorized": "请先登录后再访问此页面",
            "forbidden": "您没有权限访问此页面",
            "notFound": "请求的资源不存在",
            "pageNotFound": "您访问的页面不存在",
            "serverError": "服务器错误，请稍后重试",
            "networkError": "网络连接错误，请检查您的网络连接",
            "timeout": "请求超时，请稍后重试",
            "incorrectPassword": "当前密码不正确",
            "selfRoleChange": "不能修改自己的管理员权限",
            "selfDeactivate": "不能停用自己的账户",
        },
        "info": {
            "loading": "加载中...",
            "processing": "处理中...",
            "redirecting": "正在跳转...",
            "sessionExpired": "您的会话已过期，请重新登录",
            "registerRedirect": "请前往登录页使用新账户登录",
            "noData": "暂无数据",
        },
    },
    "form": {
        "validation": {
            "required": "请输入{field}",
            "email": "邮箱格式不正确",
        },
        "fields": {
            "username": "用户名",
            "email": "邮箱",
            "password": "密码",
            "oldPassword": "当前密码",
            "newPassword": "新密码",
            "confirmPassword": "确认密码",
        },
    },
    "actions": {
        "retry": "重试",
    },
    "pagination": {
        "summary": "共 {total} 条",
        "page": "第 {page} / {pages} 页",
        "previous": "上一页",
        "next": "下一页",
    },
}
