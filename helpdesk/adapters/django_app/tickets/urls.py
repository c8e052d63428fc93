"""
URL patterns da API JSON do Helpdesk.

Montadas sob /api/ pelo urls.py raiz. Rotas fixas (support,
announcements) vêm antes das rotas com <pk> para não conflitar.
"""

from django.urls import path

from . import api_views

app_name = 'helpdesk'

urlpatterns = [
    # Auth
    path('auth/login', api_views.LoginAPIView.as_view(), name='login'),
    path('auth/logout', api_views.LogoutAPIView.as_view(), name='logout'),

    # Tickets
    path('tickets', api_views.TicketListAPIView.as_view(), name='ticket_list'),
    path('tickets/<str:pk>', api_views.TicketDetailAPIView.as_view(), name='ticket_detail'),
    path('tickets/<str:pk>/status', api_views.TicketStatusAPIView.as_view(), name='ticket_status'),
    path('tickets/<str:pk>/forward', api_views.TicketForwardAPIView.as_view(), name='ticket_forward'),
    path('tickets/<str:pk>/respond', api_views.TicketRespondAPIView.as_view(), name='ticket_respond'),
    path('tickets/<str:pk>/comments', api_views.TicketCommentsAPIView.as_view(), name='ticket_comments'),
    path('tickets/<str:pk>/attachments', api_views.TicketAttachmentsAPIView.as_view(), name='ticket_attachments'),
    path('comments/<str:pk>', api_views.CommentDetailAPIView.as_view(), name='comment_detail'),
    path('attachments/<str:pk>', api_views.AttachmentDetailAPIView.as_view(), name='attachment_detail'),

    # Usuários
    path('users', api_views.UserListAPIView.as_view(), name='user_list'),
    path('users/support', api_views.SupportContactsAPIView.as_view(), name='support_contacts'),
    path('users/<str:pk>', api_views.UserDetailAPIView.as_view(), name='user_detail'),

    # Notificações
    path('notifications', api_views.NotificationsAPIView.as_view(), name='notifications'),
    path('notifications/announcements', api_views.AnnouncementAPIView.as_view(), name='announcements'),

    # Dashboard
    path('dashboard/stats', api_views.DashboardStatsAPIView.as_view(), name='dashboard_stats'),
]
